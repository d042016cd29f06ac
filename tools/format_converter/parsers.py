"""Decode raw text of each format into canonical values."""

import csv
import io
import json
import math
from typing import Callable, Dict, List, Optional

import toml
import yaml

from shared.logger import get_logger

from .errors import FormatError, ParseError
from .flatten import infer_type
from .formats import FormatTag
from .values import CanonicalValue, canonicalize

logger = get_logger(__name__)

NO_COMMAS_MESSAGE = (
    "Invalid CSV format: first line contains no commas. "
    "CSV should contain comma-separated values, e.g.: name,age,city"
)


def _reject_constant(name: str):
    raise ParseError(f"Invalid JSON: {name} is not a valid JSON number")


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ParseError("Invalid JSON: number out of range")
    return value


def parse_json(text: str) -> CanonicalValue:
    """Parse JSON text. NaN, Infinity and numbers beyond float range are rejected."""
    try:
        data = json.loads(text, parse_float=_parse_float, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", line=e.lineno, column=e.colno)
    return canonicalize(data)


def parse_yaml(text: str) -> CanonicalValue:
    """Parse a single YAML document. An empty document is null."""
    try:
        data = yaml.safe_load(text)
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        line = mark.line + 1 if mark else None
        column = mark.column + 1 if mark else None
        raise ParseError(f"Invalid YAML: {e}", line=line, column=column)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML: {e}")
    return canonicalize(data)


def parse_toml(text: str) -> CanonicalValue:
    """Parse TOML text. The result is always an object."""
    try:
        data = toml.loads(text)
    except toml.TomlDecodeError as e:
        raise ParseError(f"Invalid TOML: {e}", line=e.lineno, column=e.colno)
    return canonicalize(data)


def parse_csv(text: str) -> CanonicalValue:
    """
    Parse CSV text with a header row into a list of objects.

    Each data row must have exactly as many fields as the header. Field
    values go through type inference.

    Raises:
        ParseError: On empty input, a first line without commas, or a row
            whose width differs from the header
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise ParseError("CSV input is empty")

    if "," not in lines[0]:
        raise ParseError(NO_COMMAS_MESSAGE)

    reader = csv.reader(io.StringIO(text, newline=""))
    header: Optional[List[str]] = None
    records = []

    try:
        for row in reader:
            if _is_blank_row(row):
                continue

            if header is None:
                header = row
                continue

            if len(row) != len(header):
                raise ParseError(
                    f"Error reading CSV record on line {reader.line_num}: "
                    f"found {len(row)} fields, expected {len(header)}",
                    line=reader.line_num,
                )

            records.append({name: infer_type(field) for name, field in zip(header, row)})

    except csv.Error as e:
        raise ParseError(f"Error reading CSV on line {reader.line_num}: {e}", line=reader.line_num)

    logger.debug(f"Parsed {len(records)} CSV record(s) with {len(header or [])} column(s)")
    return records


def _is_blank_row(row: List[str]) -> bool:
    return not row or (len(row) == 1 and not row[0].strip())


PARSERS: Dict[FormatTag, Callable[[str], CanonicalValue]] = {
    FormatTag.JSON: parse_json,
    FormatTag.YAML: parse_yaml,
    FormatTag.TOML: parse_toml,
    FormatTag.CSV: parse_csv,
}


def parse(text: str, tag: FormatTag) -> CanonicalValue:
    """
    Parse text of the given format.

    Args:
        text: Raw document text
        tag: Format of the text

    Returns:
        Canonical value

    Raises:
        ParseError: If the text is not valid for the format
    """
    try:
        return PARSERS[tag](text)
    except FormatError:
        raise
    except Exception as e:
        # Some parser libraries leak low-level errors on malformed input
        logger.debug(f"Unexpected {tag.value} parser failure: {e!r}")
        raise ParseError(f"Invalid {tag.value.upper()}: {e}")
