"""Go-to-definition for Structurizr DSL identifiers.

A definition is the first line of the document where the identifier is the
left-hand side of an assignment, e.g. ``user = person "User"``. Only the
current document is searched.
"""

import re
from typing import List, Optional, Sequence, Tuple

from structurizr_lsp.lsp.messages import Location, Position, Range
from structurizr_lsp.lsp.protocol import LSPError, INVALID_PARAMS


class InvalidArguments(LSPError):
    """line is not text or the offset is not an integer"""

    code = INVALID_PARAMS


def _check_arguments(line, character):
    # bool is an int subclass but never a valid offset
    valid_offset = isinstance(character, int) and not isinstance(character, bool)
    if not isinstance(line, str) or not valid_offset:
        raise InvalidArguments("Invalid arguments. Expected a string and a number.")


def get_token_span(line: str, character: int) -> Optional[Tuple[int, int]]:
    """Return the [start, end) span of the space-delimited token at character.

    Returns None when the offset is out of bounds or sits on a space.
    """
    _check_arguments(line, character)
    if character < 0 or character >= len(line) or line[character] == " ":
        return None

    left = line.rfind(" ", 0, character)
    right = line.find(" ", character)

    start = 0 if left == -1 else left + 1
    end = len(line) if right == -1 else right
    return start, end


def get_word_at_position(line: str, character: int) -> str:
    """Extract the token surrounded by spaces at a character offset.

    Args:
        line: the line of text to search within
        character: code point offset into line

    Returns:
        the token found, or an empty string if there is none
    """
    span = get_token_span(line, character)
    if span is None:
        return ""
    start, end = span
    return line[start:end].strip()


def find_declaration(lines: Sequence[str], token: str) -> Optional[Position]:
    """Find the first line assigning to token.

    Returns:
        Position of the first occurrence of token on the lowest-index
        matching line (code point offsets), or None
    """
    if not token:
        return None

    pattern = re.compile(r"^\s*" + re.escape(token) + r"\s*=")
    for index, line in enumerate(lines):
        if pattern.match(line):
            return Position(line=index, character=line.find(token))
    return None


def utf16_to_index(line: str, offset: int) -> int:
    """Convert a UTF-16 code unit offset into a str index."""
    if offset < 0:
        return offset
    units = 0
    for index, char in enumerate(line):
        if units >= offset:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
    # past the end keeps the overshoot so bounds checks still fail
    return len(line) + (offset - units)


def index_to_utf16(line: str, index: int) -> int:
    """Convert a str index into a UTF-16 code unit offset."""
    return len(line[:index].encode("utf-16-le")) // 2


def token_at_position(lines: Sequence[str], position: Position) -> str:
    """Token under a cursor given in UTF-16 code units, empty if none."""
    if not 0 <= position.line < len(lines):
        return ""

    line = lines[position.line]
    _check_arguments(line, position.character)
    return get_word_at_position(line, utf16_to_index(line, position.character))


def resolve_declaration(
    uri: str, lines: List[str], position: Position
) -> Optional[Location]:
    """Locate the definition of the identifier under the cursor.

    Args:
        uri: document URI, echoed in the returned Location
        lines: document lines
        position: cursor position, character in UTF-16 code units

    Returns:
        single-point Location at the assignment, or None if no token is
        under the cursor or nothing assigns to it
    """
    return declaration_location(uri, lines, token_at_position(lines, position))


def declaration_location(
    uri: str, lines: Sequence[str], token: str
) -> Optional[Location]:
    """Single-point Location of the line assigning to token, or None."""
    match = find_declaration(lines, token)
    if match is None:
        return None

    matched_line = lines[match.line]
    start = Position(
        line=match.line, character=index_to_utf16(matched_line, match.character)
    )
    return Location(uri=uri, range=Range(start=start))
