"""Stdio message loop for the language server.

Requests are handled strictly one after another: a frame is decoded,
dispatched and answered before the next one is looked at. The loop ends on
a shutdown request or when stdin reaches end of file; the traffic log is
closed on every exit path.
"""

import asyncio
import sys
from typing import Optional

from structurizr_lsp.lsp.dispatcher import RequestDispatcher
from structurizr_lsp.lsp.documents import DocumentReader
from structurizr_lsp.lsp.protocol import INTERNAL_ERROR, JSONRPCProtocol, LSPError
from structurizr_lsp.utils.config_utils import ServerConfig
from structurizr_lsp.utils.logging_utils import Logger


CHUNK_SIZE = 65536


class LanguageServer:
    """Reads frames from a stream, answers them on a binary writer.

    The server is also the lifecycle collaborator handed to the dispatcher:
    a shutdown request calls shutdown() and the loop stops after the
    current frame.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer,
        logger: Logger,
        config: Optional[ServerConfig] = None,
        documents: Optional[DocumentReader] = None,
    ):
        """Initialize the server.

        Args:
            reader: stream delivering inbound transport chunks
            writer: binary file-like object for outbound frames (stdout)
            logger: console and traffic log, closed when run() returns
            config: settings snapshot, defaults apply when omitted
            documents: file-access collaborator
        """
        self.reader = reader
        self.writer = writer
        self.logger = logger
        self.config = config or ServerConfig()
        self.protocol = JSONRPCProtocol()
        self.dispatcher = RequestDispatcher(
            documents or DocumentReader(), self, self.config, logger
        )
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        """Stop the loop once the current frame is handled."""
        self._running = False

    async def run(self):
        """Serve until shutdown or end of input."""
        self._running = True
        try:
            while self._running:
                data = await self.reader.read(CHUNK_SIZE)
                if not data:
                    self.logger.traffic("Language Server shutting down.\n")
                    self.logger.info("Language Server shutting down.")
                    break

                for frame in self.protocol.feed(data):
                    self.handle_frame(frame)
                    if not self._running:
                        break
        finally:
            self._running = False
            self.protocol.clear()
            self.logger.close()

    def handle_frame(self, frame: bytes):
        """Decode, dispatch and answer a single frame."""
        self.logger.received(frame)
        request = None
        try:
            request = self.protocol.decode(frame)
            response = self.dispatcher.dispatch(request)
        except (LSPError, OSError, UnicodeDecodeError) as e:
            if self.config.fail_fast:
                raise
            self._reply_error(request, e)
            return

        if response is None:
            return
        request_id, result = response
        self._write(self.protocol.encode(request_id, result))

    def _reply_error(self, request, error: Exception):
        code = error.code if isinstance(error, LSPError) else INTERNAL_ERROR
        method = request.method if request is not None else "<undecoded>"
        self.logger.error(f"{method} failed: {error}")

        # notifications never get a reply
        if request is not None and request.id is None:
            return
        request_id = request.id if request is not None else None
        self._write(self.protocol.encode_error(request_id, code, str(error)))

    def _write(self, data: bytes):
        self.logger.sent(data)
        self.writer.write(data)
        self.writer.flush()


async def connect_stdin() -> asyncio.StreamReader:
    """Wrap process stdin in an asyncio stream reader."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def serve_stdio(config: ServerConfig, logger: Logger):
    """Run a language server on the process stdin/stdout."""
    reader = await connect_stdin()
    server = LanguageServer(reader, sys.stdout.buffer, logger, config)
    await server.run()
