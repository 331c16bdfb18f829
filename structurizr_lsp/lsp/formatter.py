"""Brace-depth formatter for Structurizr DSL documents.

Indentation is derived only from the trailing brace of each line: a line
ending with ``{`` opens a block, a line ending with ``}`` closes one. The
formatter is not syntax-aware and never keeps blank lines.
"""

import re
from dataclasses import dataclass
from typing import Optional

from structurizr_lsp.lsp.messages import FormattingOptions
from structurizr_lsp.lsp.protocol import LSPError, INVALID_PARAMS


DEFAULT_INDENT_SIZE = 2

_LINE_BREAK = re.compile(r"\r\n|\r")


class InvalidInput(LSPError):
    """formatter was given something other than a non-empty string"""

    code = INVALID_PARAMS


@dataclass
class FormattingResult:
    """Formatted text plus the end position of the last produced line."""

    formatted: str
    last_line_number: int
    last_line_length: int


def utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def format_document(
    text: str,
    options: Optional[FormattingOptions] = None,
    indent_size: int = DEFAULT_INDENT_SIZE,
) -> FormattingResult:
    """Re-indent a DSL document by brace depth.

    Args:
        text: full document text
        options: client formatting options; when None they are not consulted
            and the document is indented with ``indent_size`` spaces per level
        indent_size: spaces per nesting level

    Returns:
        FormattingResult with the zero-based index and UTF-16 length of the
        last line of the formatted text

    Raises:
        InvalidInput: text is not a string or is empty
    """
    if not isinstance(text, str) or not text:
        raise InvalidInput("document content must be a non-empty string")

    indent_unit = " " * indent_size
    final_newline = False
    if options is not None:
        indent_unit = " " * options.tab_size if options.insert_spaces else "\t"
        # stripping every line and dropping blank ones already covers
        # trim_trailing_whitespace and trim_final_newlines
        final_newline = bool(options.insert_final_newline)

    indent_level = 0
    lines = []
    for raw_line in _LINE_BREAK.sub("\n", text).split("\n"):
        trimmed = raw_line.strip()
        if not trimmed:
            continue

        if trimmed.endswith("}"):
            indent_level = max(0, indent_level - 1)

        lines.append(indent_unit * indent_level + trimmed)

        if trimmed.endswith("{"):
            indent_level += 1

    formatted = "\n".join(lines)
    if final_newline and lines:
        formatted += "\n"
        lines.append("")

    last_line = lines[-1] if lines else ""
    return FormattingResult(
        formatted=formatted,
        last_line_number=max(0, len(lines) - 1),
        last_line_length=utf16_length(last_line),
    )
