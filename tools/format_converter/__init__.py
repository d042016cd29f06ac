"""Format Converter - Convert between JSON, YAML, TOML and CSV."""

from .converter import ConverterConfig, DataConverter
from .errors import (
    ConversionIOError,
    FormatError,
    InvalidFormatError,
    ParseError,
    QueryError,
    SerializationError,
)
from .formats import FormatTag
from .matrix import convert, convert_value
from .parsers import parse
from .serializers import serialize

__version__ = "0.1.0"

__all__ = [
    "ConversionIOError",
    "ConverterConfig",
    "DataConverter",
    "FormatError",
    "FormatTag",
    "InvalidFormatError",
    "ParseError",
    "QueryError",
    "SerializationError",
    "convert",
    "convert_value",
    "parse",
    "serialize",
]
