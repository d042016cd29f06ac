"""Core data conversion logic."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jmespath
from jmespath.exceptions import JMESPathError

from shared.logger import get_logger

from .diagnostics import DEFAULT_MISMATCH_COLUMN_THRESHOLD
from .errors import ConversionIOError, FormatError, QueryError
from .flatten import DEFAULT_SEPARATOR
from .formats import FormatTag
from .matrix import WRAP_KEY, ConversionRoute, build_route
from .parsers import parse
from .serializers import DEFAULT_INDENT
from .values import CanonicalValue, canonicalize

logger = get_logger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ConverterConfig:
    """Conversion settings."""

    indent: int = DEFAULT_INDENT
    separator: str = DEFAULT_SEPARATOR
    wrap_key: str = WRAP_KEY
    unwrap_toml_data: bool = True
    mismatch_column_threshold: int = DEFAULT_MISMATCH_COLUMN_THRESHOLD


class DataConverter:
    """
    Convert between JSON, YAML, TOML and CSV.

    Wraps the conversion matrix with configuration, file handling and
    JMESPath querying.
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        """
        Initialize data converter.

        Args:
            config: Conversion settings (defaults if None)
        """
        self.config = config or ConverterConfig()
        self._routes: Dict[Tuple[FormatTag, FormatTag], ConversionRoute] = {
            (source, target): build_route(
                source,
                target,
                wrap_key=self.config.wrap_key,
                unwrap_toml=self.config.unwrap_toml_data,
            )
            for source in FormatTag
            for target in FormatTag
        }
        logger.debug(f"Initialized DataConverter with {self.config}")

    def route(self, source: FormatTag, target: FormatTag) -> ConversionRoute:
        """Get the conversion route for a format pair."""
        return self._routes[(FormatTag(source), FormatTag(target))]

    def parse(self, data: str, format: FormatTag) -> CanonicalValue:
        """
        Parse data string.

        Args:
            data: Data string
            format: Input format

        Returns:
            Parsed data

        Raises:
            ParseError: If parsing fails
        """
        return parse(data, format)

    def convert(self, data: str, from_format: FormatTag, to_format: FormatTag) -> str:
        """
        Convert a document from one format to another.

        Args:
            data: Input document
            from_format: Format of the input
            to_format: Target format

        Returns:
            Formatted string

        Raises:
            ParseError: If the input is invalid
            SerializationError: If the target cannot represent the data
        """
        try:
            return self.route(from_format, to_format).run(
                data,
                indent=self.config.indent,
                separator=self.config.separator,
            )
        except FormatError as e:
            logger.error(f"Failed to convert {from_format.value} to {to_format.value}: {e}")
            raise

    def convert_value(self, data: Any, from_format: FormatTag, to_format: FormatTag) -> str:
        """
        Serialize already parsed data as if it had been read from ``from_format``.

        Args:
            data: Data to convert (any canonical value)
            from_format: Format the data was read from
            to_format: Target format

        Returns:
            Formatted string
        """
        return self.route(from_format, to_format).apply(
            canonicalize(data),
            indent=self.config.indent,
            separator=self.config.separator,
        )

    def query(self, data: Any, query_str: str) -> Any:
        """
        Query data using JMESPath.

        Args:
            data: Data to query
            query_str: JMESPath query string

        Returns:
            Query result

        Raises:
            QueryError: If the query is invalid or fails
        """
        try:
            return jmespath.search(query_str, data)
        except JMESPathError as e:
            logger.error(f"Query failed: {e}")
            raise QueryError(f"Query '{query_str}' failed: {e}")

    def read_text(self, filepath: PathLike) -> str:
        """
        Read a document from disk.

        Raises:
            ConversionIOError: If the file cannot be read
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConversionIOError(f"Error reading from {filepath}: {e}")

    def write_text(self, filepath: PathLike, content: str) -> None:
        """
        Write a document to disk.

        Raises:
            ConversionIOError: If the file cannot be written
        """
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConversionIOError(f"Error writing to {filepath}: {e}")

    def load_file(self, filepath: PathLike, format: Optional[FormatTag] = None) -> CanonicalValue:
        """
        Load data from file.

        Args:
            filepath: Path to file
            format: Format to parse (detected from the extension if None)

        Returns:
            Parsed data

        Raises:
            InvalidFormatError: If the format cannot be determined
            ConversionIOError: If the file cannot be read
            ParseError: If parsing fails
        """
        format = format or FormatTag.from_path(filepath)
        logger.info(f"Loading {format.value} from {filepath}")
        return self.parse(self.read_text(filepath), format)

    def convert_file(
        self,
        input_path: PathLike,
        output_path: PathLike,
        from_format: Optional[FormatTag] = None,
        to_format: Optional[FormatTag] = None,
        query: Optional[str] = None,
    ) -> str:
        """
        Convert file from one format to another.

        Formats are detected from the file extensions unless given.

        Args:
            input_path: Input file path
            output_path: Output file path
            from_format: Source format (detected if None)
            to_format: Target format (detected if None)
            query: Optional JMESPath query applied before writing

        Returns:
            The converted text that was written
        """
        from_format = from_format or FormatTag.from_path(input_path)
        to_format = to_format or FormatTag.from_path(output_path)

        output_data = self.convert_text(self.read_text(input_path), from_format, to_format, query)
        self.write_text(output_path, output_data)

        logger.info(f"Converted {input_path} to {output_path}")
        return output_data

    def convert_text(
        self,
        data: str,
        from_format: FormatTag,
        to_format: FormatTag,
        query: Optional[str] = None,
    ) -> str:
        """Convert a document, optionally narrowing it with a JMESPath query first."""
        if not query:
            return self.convert(data, from_format, to_format)

        parsed = self.parse(data, from_format)
        logger.info(f"Applying query: {query}")
        return self.convert_value(self.query(parsed, query), from_format, to_format)
