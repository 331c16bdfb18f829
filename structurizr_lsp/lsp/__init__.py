"""LSP server module for Structurizr DSL documents."""

from structurizr_lsp.lsp.protocol import JSONRPCProtocol, LSPError, MalformedFrame
from structurizr_lsp.lsp.formatter import FormattingResult, InvalidInput, format_document
from structurizr_lsp.lsp.resolver import InvalidArguments, resolve_declaration
from structurizr_lsp.lsp.dispatcher import RequestDispatcher
from structurizr_lsp.lsp.server import LanguageServer

__all__ = [
    "JSONRPCProtocol",
    "LSPError",
    "MalformedFrame",
    "FormattingResult",
    "InvalidInput",
    "format_document",
    "InvalidArguments",
    "resolve_declaration",
    "RequestDispatcher",
    "LanguageServer",
]
