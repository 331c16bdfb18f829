"""shared fixtures for structurizr-lsp tests"""

import io
import json

import pytest

from structurizr_lsp.lsp.protocol import JSONRPCProtocol
from structurizr_lsp.utils.logging_utils import Logger


WORKSPACE_DSL = 'workspace {\nmodel {\nuser = person "User"\n}\n}'
WORKSPACE_FORMATTED = 'workspace {\n  model {\n    user = person "User"\n  }\n}'


def make_frame(message: dict) -> bytes:
    """frame a JSON-RPC message the way an editor sends it"""
    body = json.dumps(message).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


def read_responses(data: bytes) -> list:
    """split server output into decoded JSON bodies"""
    protocol = JSONRPCProtocol()
    responses = []
    for frame in protocol.feed(data):
        _, _, body = frame.partition(b"\r\n\r\n")
        responses.append(json.loads(body))
    return responses


@pytest.fixture
def protocol():
    """JSONRPCProtocol instance"""
    return JSONRPCProtocol()


@pytest.fixture
def console():
    """captured console output"""
    return io.StringIO()


@pytest.fixture
def log_path(tmp_path):
    """traffic log location"""
    return tmp_path / "language_server.log"


@pytest.fixture
def logger(log_path, console):
    """logger writing its traffic log under tmp_path"""
    with Logger(log_file=str(log_path), stream=console) as logger:
        yield logger


@pytest.fixture
def write_document(tmp_path):
    """write a DSL document and return its file:// URI"""
    def _write(text: str, name: str = "workspace.dsl") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return f"file://{path}"
    return _write
