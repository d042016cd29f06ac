"""Locate parse errors in the input for display."""

import re
from dataclasses import dataclass
from typing import Optional

from .errors import FormatError, ParseError

DEFAULT_MISMATCH_COLUMN_THRESHOLD = 10

_LINE_RE = re.compile(r"line (\d+)")
_COLUMN_RE = re.compile(r"column (\d+)")


@dataclass(frozen=True)
class ErrorLocation:
    """1-based position of a parse error."""

    line: int
    column: Optional[int] = None


def extract_error_line(message: str) -> Optional[int]:
    """
    Find a line number in an error message.

    Looks for the first "line N" in the text. Used when the error does
    not carry a structured position.
    """
    match = _LINE_RE.search(message)
    return int(match.group(1)) if match else None


def _extract_error_column(message: str) -> Optional[int]:
    match = _COLUMN_RE.search(message)
    return int(match.group(1)) if match else None


def locate_error(error: FormatError) -> Optional[ErrorLocation]:
    """
    Get the input position of an error.

    Structured positions attached by the parsers win; otherwise the
    message text is scanned.
    """
    if isinstance(error, ParseError) and error.line is not None:
        return ErrorLocation(line=error.line, column=error.column)

    line = extract_error_line(error.message)
    if line is None:
        return None
    return ErrorLocation(line=line, column=_extract_error_column(error.message))


def is_probable_format_mismatch(
    error: FormatError,
    column_threshold: int = DEFAULT_MISMATCH_COLUMN_THRESHOLD,
) -> bool:
    """
    Guess whether a parse error means the input is in a different format.

    A failure in the first few columns of line 1 usually means the parser
    choked on the very first token, e.g. YAML fed to the JSON parser. The
    threshold is a rule of thumb, not a measured cut-off.
    """
    location = locate_error(error)
    if location is None or location.line != 1 or location.column is None:
        return False
    return location.column <= column_threshold


def is_syntax_error(error: FormatError, column_threshold: int = DEFAULT_MISMATCH_COLUMN_THRESHOLD) -> bool:
    """True when the error points at a real position worth highlighting."""
    return locate_error(error) is not None and not is_probable_format_mismatch(error, column_threshold)
