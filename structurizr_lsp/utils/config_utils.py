"""configuration management utilities

Settings come from an ini file, ./config.ini unless STRUCTURIZR_LSP_CONFIG
names another one. Missing files and keys fall back to the defaults of
ServerConfig.
"""

import os
import configparser
from dataclasses import dataclass

CONFIG_ENV_VAR = "STRUCTURIZR_LSP_CONFIG"
DEFAULT_CONFIG_PATH = "./config.ini"

TRUE_VALUES = ("true", "1", "yes", "on")

global_config = configparser.ConfigParser()


def load_config_ini(config_path: str = None) -> bool:
    """load configuration file into the global config

    Args:
        config_path: path to the ini file, defaults to $STRUCTURIZR_LSP_CONFIG
            or ./config.ini

    Returns:
        True if a file was read
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    if not os.path.exists(config_path):
        return False
    return bool(global_config.read(config_path, encoding="utf-8"))


def reset_config() -> None:
    """drop every loaded section (for testing)"""
    for section in global_config.sections():
        global_config.remove_section(section)


def get_config_value(section: str, key: str, default=None):
    """raw string value of section.key, or default"""
    if not global_config.has_option(section, key):
        return default
    return global_config.get(section, key)


def get_config_int(section: str, key: str, default: int = 0) -> int:
    """get configuration value as integer"""
    value = get_config_value(section, key)
    return default if value is None else int(value)


def get_config_bool(section: str, key: str, default: bool = False) -> bool:
    """get configuration value as boolean"""
    value = get_config_value(section, key)
    return default if value is None else value.strip().lower() in TRUE_VALUES


@dataclass
class ServerConfig:
    """Settings snapshot taken once at startup.

    [server]     name, version: reported in the capability advertisement
                 log_file: traffic log path
                 fail_fast: let request errors stop the server
    [formatting] indent_size: spaces per nesting level
                 honor_client_options: apply the client's FormattingOptions
    """

    name: str = "structurizr LSP"
    version: str = "1.0.0"
    log_file: str = "language_server.log"
    fail_fast: bool = True
    indent_size: int = 2
    honor_client_options: bool = False

    @classmethod
    def from_config(cls) -> "ServerConfig":
        defaults = cls()
        return cls(
            name=get_config_value("server", "name", defaults.name),
            version=get_config_value("server", "version", defaults.version),
            log_file=get_config_value("server", "log_file", defaults.log_file),
            fail_fast=get_config_bool("server", "fail_fast", defaults.fail_fast),
            indent_size=get_config_int(
                "formatting", "indent_size", defaults.indent_size
            ),
            honor_client_options=get_config_bool(
                "formatting", "honor_client_options", defaults.honor_client_options
            ),
        )


# auto-load on import
load_config_ini()
