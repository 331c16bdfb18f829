"""configuration and logger utility tests"""

import pytest

from structurizr_lsp.utils.config_utils import (
    ServerConfig,
    get_config_bool,
    get_config_int,
    get_config_value,
    load_config_ini,
    reset_config,
)
from structurizr_lsp.utils.logging_utils import Logger


CONFIG_INI = """\
[server]
name = dsl server
version = 2.0.0
log_file = traffic.log
fail_fast = no

[formatting]
indent_size = 4
honor_client_options = TRUE
"""


@pytest.fixture
def clean_config():
    """start and end every test with an empty configuration"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config_file(tmp_path, clean_config):
    path = tmp_path / "config.ini"
    path.write_text(CONFIG_INI, encoding="utf-8")
    load_config_ini(str(path))
    return path


class TestConfigUtils:
    """config.ini access"""

    def test_missing_file_is_ignored(self, tmp_path, clean_config):
        assert load_config_ini(str(tmp_path / "absent.ini")) is False
        assert get_config_value("server", "name") is None

    def test_path_from_environment(self, tmp_path, monkeypatch, clean_config):
        path = tmp_path / "elsewhere.ini"
        path.write_text(CONFIG_INI, encoding="utf-8")
        monkeypatch.setenv("STRUCTURIZR_LSP_CONFIG", str(path))

        assert load_config_ini() is True
        assert get_config_value("server", "log_file") == "traffic.log"

    def test_defaults_when_unset(self, clean_config):
        assert get_config_value("server", "name", default="x") == "x"
        assert get_config_int("formatting", "indent_size", 2) == 2
        assert get_config_bool("server", "fail_fast", True) is True

    def test_typed_values(self, config_file):
        assert get_config_value("server", "name") == "dsl server"
        assert get_config_int("formatting", "indent_size") == 4
        assert get_config_bool("server", "fail_fast", True) is False
        assert get_config_bool("formatting", "honor_client_options") is True

    def test_server_config_defaults(self, clean_config):
        assert ServerConfig.from_config() == ServerConfig()

    def test_server_config_from_file(self, config_file):
        assert ServerConfig.from_config() == ServerConfig(
            name="dsl server",
            version="2.0.0",
            log_file="traffic.log",
            fail_fast=False,
            indent_size=4,
            honor_client_options=True,
        )


class TestLogger:
    """console and traffic log"""

    def test_console_lines(self, logger, console):
        logger.info("ready")
        logger.error("broken")

        output = console.getvalue()
        assert "[structurizr-lsp] INFO: ready" in output
        assert "[structurizr-lsp] ERROR: broken" in output

    def test_console_keeps_brackets(self, logger, console):
        """messages are not parsed as rich markup"""
        logger.warning("[bold]x[/bold]")

        assert "[bold]x[/bold]" in console.getvalue()

    def test_log_is_appended(self, log_path, console):
        log_path.write_text("earlier\n", encoding="utf-8")

        with Logger(log_file=str(log_path), stream=console) as logger:
            logger.traffic("later\n")

        assert log_path.read_text(encoding="utf-8") == "earlier\nlater\n"

    def test_sent_records_body_only(self, logger, log_path):
        logger.sent(b'Content-Length: 2\r\n\r\n{}')

        with open(log_path, encoding="utf-8", newline="") as f:
            assert f.read() == "Sent: {}\r\n\r\n"

    def test_close_is_idempotent(self, logger):
        logger.close()
        logger.close()
        logger.traffic("dropped")

        assert logger.closed

    def test_traffic_log_disabled(self, console):
        logger = Logger(log_file=None, stream=console)

        logger.traffic("nothing")
        logger.close()

        assert logger.closed
