"""Error types raised by the format converter."""

from typing import Optional


class FormatError(ValueError):
    """
    Base class for all conversion failures.

    Derives from ValueError so callers that treat bad input as a value
    error keep working.
    """

    label = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class ParseError(FormatError):
    """Source text does not match the grammar of its claimed format."""

    label = "Parse Error"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class InvalidFormatError(ParseError):
    """Format tag or file extension is unknown or missing."""

    label = "Invalid Format"


class SerializationError(FormatError):
    """Value cannot be represented in the target format."""

    label = "Serialization Error"


class ConversionIOError(FormatError):
    """Reading the input or writing the output file failed."""

    label = "IO Error"


class QueryError(FormatError):
    """JMESPath query could not be compiled or evaluated."""

    label = "Query Error"
