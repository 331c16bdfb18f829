"""End-to-end tests running the server as a subprocess over real pipes."""

import asyncio
import os
import sys
from pathlib import Path

import pytest

from conftest import WORKSPACE_DSL, WORKSPACE_FORMATTED, make_frame, read_responses

ROOT = Path(__file__).resolve().parent.parent

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="stdin pipe reader needs a POSIX event loop"
)


async def run_server(cwd: Path, data: bytes):
    """Start the server, send data, close stdin and collect the output."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in [str(ROOT), env.get("PYTHONPATH", "")] if p
    )
    env.pop("STRUCTURIZR_LSP_CONFIG", None)

    process = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "structurizr_lsp.server",
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd),
        env=env,
    )
    stdout, stderr = await asyncio.wait_for(process.communicate(data), timeout=30)
    return process.returncode, stdout, stderr


class TestE2EServer:
    """full sessions against the installed entry point"""

    async def test_session(self, tmp_path):
        document = tmp_path / "workspace.dsl"
        document.write_text(WORKSPACE_DSL, encoding="utf-8")
        uri = f"file://{document}"

        data = (
            make_frame({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}})
            + make_frame({"jsonrpc": "2.0", "method": "initialized", "params": {}})
            + make_frame(
                {
                    "jsonrpc": "2.0",
                    "id": 2,
                    "method": "textDocument/formatting",
                    "params": {"textDocument": {"uri": uri}, "options": {}},
                }
            )
            + make_frame(
                {
                    "jsonrpc": "2.0",
                    "id": 3,
                    "method": "textDocument/definition",
                    "params": {
                        "textDocument": {"uri": uri},
                        "position": {"line": 2, "character": 0},
                    },
                }
            )
            + make_frame({"jsonrpc": "2.0", "id": 4, "method": "shutdown"})
        )

        returncode, stdout, stderr = await run_server(tmp_path, data)

        assert returncode == 0, stderr.decode()
        initialize, formatting, definition = read_responses(stdout)
        assert initialize["result"]["serverInfo"]["name"] == "structurizr LSP"
        assert formatting["result"][0]["newText"] == WORKSPACE_FORMATTED
        assert definition["result"] == {
            "uri": uri,
            "range": {"start": {"line": 2, "character": 0}},
        }
        assert b"Language Server is running" in stderr
        assert (tmp_path / "language_server.log").exists()

    async def test_end_of_input(self, tmp_path):
        returncode, stdout, _ = await run_server(tmp_path, b"")

        assert returncode == 0
        assert stdout == b""
        log = (tmp_path / "language_server.log").read_text(encoding="utf-8")
        assert "Language Server shutting down." in log

    async def test_malformed_frame_exits_non_zero(self, tmp_path):
        returncode, stdout, _ = await run_server(
            tmp_path, b"Content-Length: 5\r\n\r\nnope!"
        )

        assert returncode != 0
        assert stdout == b""
