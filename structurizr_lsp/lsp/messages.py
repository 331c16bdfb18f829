"""Typed LSP structures and request variants.

Inbound requests are decoded once into one of the request dataclasses below,
selected by method name. Outbound structures know how to turn themselves
back into plain dicts for JSON serialization.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any


METHOD_INITIALIZED = "initialized"
METHOD_SHUTDOWN = "shutdown"
METHOD_DID_SAVE = "textDocument/didSave"
METHOD_DID_OPEN = "textDocument/didOpen"
METHOD_DID_CHANGE = "textDocument/didChange"
METHOD_DID_CLOSE = "textDocument/didClose"
METHOD_FORMATTING = "textDocument/formatting"
METHOD_DEFINITION = "textDocument/definition"


def require_object(value: Any, name: str) -> Dict[str, Any]:
    """Return value if it is a JSON object, raise TypeError otherwise."""
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be an object, got {value!r}")
    return value


# ═══════════════════════════════════════════════════════════════════════════
# Structures
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class Position:
    line: int
    character: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        require_object(data, "position")
        line = data["line"]
        character = data["character"]
        if not isinstance(line, int) or isinstance(line, bool):
            raise TypeError(f"position line must be an integer, got {line!r}")
        if not isinstance(character, int) or isinstance(character, bool):
            raise TypeError(
                f"position character must be an integer, got {character!r}"
            )
        return cls(line=line, character=character)

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass
class Range:
    """A start position and an optional exclusive end.

    A range without an end describes a single point.
    """

    start: Position
    end: Optional[Position] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"start": self.start.to_dict()}
        if self.end is not None:
            data["end"] = self.end.to_dict()
        return data


@dataclass
class Location:
    uri: str
    range: Range

    def to_dict(self) -> Dict[str, Any]:
        return {"uri": self.uri, "range": self.range.to_dict()}


@dataclass
class TextEdit:
    range: Range
    new_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"newText": self.new_text, "range": self.range.to_dict()}


@dataclass
class FormattingOptions:
    """Client formatting preferences (LSP FormattingOptions)."""

    tab_size: int = 2
    insert_spaces: bool = True
    trim_trailing_whitespace: Optional[bool] = None
    insert_final_newline: Optional[bool] = None
    trim_final_newlines: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FormattingOptions":
        if data is None:
            return cls()
        require_object(data, "options")
        return cls(
            tab_size=int(data.get("tabSize", 2)),
            insert_spaces=bool(data.get("insertSpaces", True)),
            trim_trailing_whitespace=data.get("trimTrailingWhitespace"),
            insert_final_newline=data.get("insertFinalNewline"),
            trim_final_newlines=data.get("trimFinalNewlines"),
        )


# ═══════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class Request:
    """Base request: every variant keeps its id, method and raw params."""

    id: Optional[int]
    method: str
    params: Any = field(default=None, repr=False)


@dataclass
class InitializedRequest(Request):
    pass


@dataclass
class ShutdownRequest(Request):
    pass


@dataclass
class DidSaveRequest(Request):
    pass


@dataclass
class DidOpenRequest(Request):
    uri: str = ""
    text: str = ""


@dataclass
class DidChangeRequest(Request):
    """Full-sync change: text is the whole document after the edit."""

    uri: str = ""
    text: str = ""


@dataclass
class DidCloseRequest(Request):
    uri: str = ""


@dataclass
class FormattingRequest(Request):
    uri: str = ""
    options: FormattingOptions = field(default_factory=FormattingOptions)


@dataclass
class DefinitionRequest(Request):
    uri: str = ""
    position: Position = field(default_factory=lambda: Position(0, 0))


@dataclass
class GenericRequest(Request):
    """Any method without a dedicated variant (initialize included)."""


def _document_uri(params: Dict[str, Any]) -> str:
    document = require_object(params["textDocument"], "textDocument")
    uri = document["uri"]
    if not isinstance(uri, str):
        raise TypeError(f"textDocument.uri must be a string, got {uri!r}")
    return uri


def _string(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {value!r}")
    return value


def _changed_text(params: Dict[str, Any]) -> str:
    changes = params["contentChanges"]
    if not isinstance(changes, list) or not changes:
        raise ValueError(f"contentChanges must be a non-empty list, got {changes!r}")
    # full sync: the last change holds the complete text
    change = require_object(changes[-1], "contentChanges item")
    return _string(change["text"], "contentChanges text")


def parse_request(message: Dict[str, Any]) -> Request:
    """Build the typed request variant for a decoded JSON-RPC message.

    Raises:
        KeyError, TypeError, ValueError: params do not fit the method
    """
    method = message["method"]
    request_id = message.get("id")
    params = message.get("params")

    if method == METHOD_INITIALIZED:
        return InitializedRequest(request_id, method, params)
    if method == METHOD_SHUTDOWN:
        return ShutdownRequest(request_id, method, params)
    if method == METHOD_DID_SAVE:
        return DidSaveRequest(request_id, method, params)
    if method == METHOD_DID_OPEN:
        require_object(params, "params")
        document = require_object(params["textDocument"], "textDocument")
        return DidOpenRequest(
            request_id,
            method,
            params,
            uri=_document_uri(params),
            text=_string(document["text"], "textDocument.text"),
        )
    if method == METHOD_DID_CHANGE:
        require_object(params, "params")
        return DidChangeRequest(
            request_id,
            method,
            params,
            uri=_document_uri(params),
            text=_changed_text(params),
        )
    if method == METHOD_DID_CLOSE:
        require_object(params, "params")
        return DidCloseRequest(
            request_id, method, params, uri=_document_uri(params)
        )
    if method == METHOD_FORMATTING:
        require_object(params, "params")
        return FormattingRequest(
            request_id,
            method,
            params,
            uri=_document_uri(params),
            options=FormattingOptions.from_dict(params.get("options")),
        )
    if method == METHOD_DEFINITION:
        require_object(params, "params")
        return DefinitionRequest(
            request_id,
            method,
            params,
            uri=_document_uri(params),
            position=Position.from_dict(params["position"]),
        )
    return GenericRequest(request_id, method, params)
