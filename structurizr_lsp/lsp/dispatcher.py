"""Request routing for the Structurizr DSL language server.

Methods are matched exactly. Anything without a route of its own (the
initialize handshake included) is answered with the capability
advertisement.
"""

from typing import Any, Optional, Tuple

from structurizr_lsp.lsp.documents import DocumentReader
from structurizr_lsp.lsp.formatter import format_document
from structurizr_lsp.lsp.messages import (
    DefinitionRequest,
    DidChangeRequest,
    DidCloseRequest,
    DidOpenRequest,
    DidSaveRequest,
    FormattingRequest,
    InitializedRequest,
    Position,
    Range,
    Request,
    ShutdownRequest,
    TextEdit,
)
from structurizr_lsp.lsp.resolver import declaration_location, token_at_position
from structurizr_lsp.utils.config_utils import ServerConfig
from structurizr_lsp.utils.logging_utils import Logger


# (request id, result) to be framed by the codec
Response = Tuple[Any, Any]

# TextDocumentSyncKind.Full: every change carries the whole text
TEXT_DOCUMENT_SYNC_FULL = 1


class RequestDispatcher:
    """Routes typed requests to the formatter and the resolver.

    Collaborators:
    - documents: reads document content for a URI
    - lifecycle: object with a shutdown() method, stops the server
    - logger: receives diagnostic lines
    """

    def __init__(
        self,
        documents: DocumentReader,
        lifecycle,
        config: ServerConfig,
        logger: Logger,
    ):
        self.documents = documents
        self.lifecycle = lifecycle
        self.config = config
        self.logger = logger

    def dispatch(self, request: Request) -> Optional[Response]:
        """Handle one request.

        Returns:
            (id, result) to send back, or None when nothing is sent
        """
        if isinstance(request, (InitializedRequest, DidSaveRequest)):
            return None
        if isinstance(request, DidOpenRequest):
            self.open_document(request)
            return None
        if isinstance(request, DidChangeRequest):
            self.change_document(request)
            return None
        if isinstance(request, DidCloseRequest):
            self.close_document(request)
            return None
        if isinstance(request, ShutdownRequest):
            self.logger.info("shutdown requested")
            self.lifecycle.shutdown()
            return None
        if isinstance(request, FormattingRequest):
            return request.id, self.formatting(request)
        if isinstance(request, DefinitionRequest):
            return request.id, self.definition(request)
        return request.id, self.capabilities()

    def capabilities(self) -> dict:
        """Capability advertisement and server identity."""
        return {
            "capabilities": {
                "textDocumentSync": TEXT_DOCUMENT_SYNC_FULL,
                "documentFormattingProvider": True,
                "definitionProvider": True,
            },
            "serverInfo": {
                "version": self.config.version,
                "name": self.config.name,
            },
        }

    def formatting(self, request: FormattingRequest) -> list:
        """Replace the whole document with its formatted text."""
        content = self.documents.read_text(request.uri)
        options = request.options if self.config.honor_client_options else None
        result = format_document(
            content, options=options, indent_size=self.config.indent_size
        )

        edit = TextEdit(
            range=Range(
                start=Position(line=0, character=0),
                end=Position(
                    line=result.last_line_number,
                    character=result.last_line_length,
                ),
            ),
            new_text=result.formatted,
        )
        return [edit.to_dict()]

    def definition(self, request: DefinitionRequest) -> Optional[dict]:
        """Location where the identifier under the cursor is assigned."""
        lines = self.documents.read_lines(request.uri)
        token = token_at_position(lines, request.position)
        location = declaration_location(request.uri, lines, token)
        if location is None:
            return None

        self.logger.traffic(f"Getting declaration for {token}\r\n\r\n")
        return location.to_dict()

    def open_document(self, request: DidOpenRequest):
        self.documents.open(request.uri, request.text)

    def change_document(self, request: DidChangeRequest):
        self.documents.update(request.uri, request.text)

    def close_document(self, request: DidCloseRequest):
        self.documents.close(request.uri)
