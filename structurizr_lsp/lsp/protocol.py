"""JSON-RPC framing for the language server.

Every message on the wire is framed with a Content-Length header:
  Content-Length: <length>\r\n
  \r\n
  <JSON payload>

Inbound frames are decoded into typed requests (see messages.py); outbound
results are serialized without any knowledge of their shape.
"""

import json
from typing import Any, List, Optional

from structurizr_lsp.lsp.messages import Request, parse_request


HEADER_SEPARATOR = b"\r\n\r\n"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class LSPError(Exception):
    """base class for errors raised while serving a request"""

    code = INTERNAL_ERROR


class MalformedFrame(LSPError):
    """frame body is not a JSON object carrying a method"""

    code = PARSE_ERROR


class JSONRPCProtocol:
    """Handles Content-Length framing and request decoding."""

    def __init__(self):
        self.buffer = b""

    def feed(self, data: bytes) -> List[bytes]:
        """Feed transport data and return complete frames.

        Args:
            data: raw bytes read from stdin

        Returns:
            list of complete frames, header included (may be empty)
        """
        self.buffer += data
        frames = []

        while True:
            frame = self._try_split_frame()
            if frame is None:
                break
            frames.append(frame)

        return frames

    def _try_split_frame(self) -> Optional[bytes]:
        """Try to cut one complete frame off the front of the buffer."""
        while True:
            header_end = self.buffer.find(HEADER_SEPARATOR)
            if header_end == -1:
                return None

            header = self.buffer[:header_end].decode("ascii", errors="replace")
            content_length = None
            for line in header.split("\r\n"):
                if line.lower().startswith("content-length:"):
                    content_length = int(line.split(":")[1].strip())
                    break

            if content_length is not None:
                break
            # no length header, drop it and look again
            self.buffer = self.buffer[header_end + len(HEADER_SEPARATOR) :]

        content_end = header_end + len(HEADER_SEPARATOR) + content_length
        if len(self.buffer) < content_end:
            return None

        frame = self.buffer[:content_end]
        self.buffer = self.buffer[content_end:]
        return frame

    def decode(self, frame: bytes) -> Request:
        """Decode one frame into a typed request.

        The body is whatever follows the first blank-line marker; a frame
        without a marker is taken to be a bare body.

        Raises:
            MalformedFrame: body is not JSON, not an object, or has no method
        """
        _, separator, body = frame.partition(HEADER_SEPARATOR)
        if not separator:
            body = frame

        try:
            message = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedFrame(f"frame body is not valid JSON: {e}") from e

        if not isinstance(message, dict):
            raise MalformedFrame("frame body is not a JSON object")
        if not isinstance(message.get("method"), str):
            raise MalformedFrame("frame body has no method")

        try:
            return parse_request(message)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedFrame(
                f"invalid params for {message['method']}: {e!r}"
            ) from e

    def encode(self, request_id: Any, result: Any) -> bytes:
        """Encode a result as a framed JSON-RPC response.

        Args:
            request_id: id of the request being answered
            result: any JSON-serializable value

        Returns:
            bytes ready to write to stdout
        """
        return self._frame({"jsonrpc": "2.0", "id": request_id, "result": result})

    def encode_error(self, request_id: Any, code: int, message: str) -> bytes:
        """Encode a JSON-RPC error response."""
        return self._frame(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "error": {"code": code, "message": message},
            }
        )

    def _frame(self, message: dict) -> bytes:
        content_bytes = json.dumps(message).encode("utf-8")
        header = f"Content-Length: {len(content_bytes)}\r\n\r\n"
        return header.encode("ascii") + content_bytes

    def clear(self):
        """Clear the internal buffer."""
        self.buffer = b""
