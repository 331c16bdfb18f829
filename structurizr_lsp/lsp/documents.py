"""Access to documents named by file:// URIs.

Documents the client has opened are served from memory, as last synced by
didOpen/didChange; everything else is read from disk.
"""

from pathlib import Path
from typing import Dict, List


SCHEME_PREFIX_LENGTH = len("file://")


def _universal_newlines(text: str) -> str:
    # same translation open() applies to files read from disk
    return text.replace("\r\n", "\n").replace("\r", "\n")


class DocumentReader:
    """Resolves document URIs to open buffers or local files."""

    def __init__(self):
        self._open: Dict[str, str] = {}

    def uri_to_path(self, uri: str) -> Path:
        """Strip the scheme prefix and treat the rest as a local path."""
        return Path(uri[SCHEME_PREFIX_LENGTH:])

    def open(self, uri: str, text: str):
        self._open[uri] = _universal_newlines(text)

    def update(self, uri: str, text: str):
        """Replace the buffer with the full text of the document."""
        self._open[uri] = _universal_newlines(text)

    def close(self, uri: str):
        self._open.pop(uri, None)

    def is_open(self, uri: str) -> bool:
        return uri in self._open

    def read_text(self, uri: str) -> str:
        if uri in self._open:
            return self._open[uri]
        with open(self.uri_to_path(uri), "r", encoding="utf-8") as f:
            return f.read()

    def read_lines(self, uri: str) -> List[str]:
        """Document lines split on line feeds only."""
        return self.read_text(uri).split("\n")
