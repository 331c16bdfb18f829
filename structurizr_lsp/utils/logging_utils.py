"""logging utilities with rich support

Two sinks are kept apart:
- the console, on stderr, for human-readable status lines
  (stdout carries protocol frames and must stay clean)
- the traffic log, an append-only file recording every frame in and out
"""

import sys
from datetime import datetime
from typing import Optional
from rich.console import Console
from rich.theme import Theme


# custom theme for log levels
custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "debug": "dim white",
})

FRAME_SEPARATOR = "\r\n\r\n"


class Logger:
    """rich console logger plus diagnostic traffic log

    Opened once at startup and passed to whoever needs it. Use as a context
    manager, or call close() on every exit path.
    """

    def __init__(
        self,
        prefix: str = "structurizr-lsp",
        log_file: Optional[str] = "language_server.log",
        stream=None,
    ):
        """initialize logger

        Args:
            prefix: log message prefix
            log_file: path of the traffic log (appended to), None disables it
            stream: console stream, defaults to stderr
        """
        self.prefix = prefix
        self.log_file = log_file
        self.console = Console(
            file=stream if stream is not None else sys.stderr,
            theme=custom_theme,
            soft_wrap=True,
        )
        self._traffic_file = None
        if log_file is not None:
            # newline="" keeps the \r\n of recorded frames verbatim
            self._traffic_file = open(log_file, "a", encoding="utf-8", newline="")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._traffic_file is None or self._traffic_file.closed

    def _format(self, level: str, message: str) -> str:
        """format log message"""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"[{timestamp}] [{self.prefix}] {level}: {message}"

    def info(self, message: str):
        """log info level message"""
        self.console.print(self._format("INFO", message), style="info", markup=False)

    def error(self, message: str):
        """log error level message"""
        self.console.print(self._format("ERROR", message), style="error", markup=False)

    def warning(self, message: str):
        """log warning level message"""
        self.console.print(
            self._format("WARNING", message), style="warning", markup=False
        )

    def debug(self, message: str):
        """log debug level message"""
        self.console.print(self._format("DEBUG", message), style="debug", markup=False)

    def traffic(self, message: str):
        """append a record to the traffic log"""
        if self.closed:
            return
        self._traffic_file.write(message)
        self._traffic_file.flush()

    def received(self, frame: bytes):
        """record an inbound frame"""
        text = frame.decode("utf-8", errors="replace")
        self.traffic(f"Received: {text}{FRAME_SEPARATOR}")

    def sent(self, frame: bytes):
        """record the body of an outbound frame"""
        _, _, body = frame.partition(FRAME_SEPARATOR.encode("ascii"))
        self.traffic(f"Sent: {body.decode('utf-8', errors='replace')}{FRAME_SEPARATOR}")

    def close(self):
        """flush and close the traffic log (safe to call twice)"""
        if self._traffic_file is not None and not self._traffic_file.closed:
            self._traffic_file.flush()
            self._traffic_file.close()

