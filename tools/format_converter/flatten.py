"""Flattening and type inference for the CSV boundary."""

import math
import re
from typing import Any, Dict, List

from .errors import SerializationError
from .values import INT64_MAX, INT64_MIN, CanonicalValue, to_compact_json

DEFAULT_SEPARATOR = "_"

FlatRecord = Dict[str, str]

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def render_scalar(value: CanonicalValue) -> str:
    """
    Render a leaf value as CSV field text.

    Strings pass through, numbers and booleans use their natural text,
    null becomes an empty field, and nested arrays or objects become
    compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return to_compact_json(value)


def flatten(value: CanonicalValue, prefix: str = "", separator: str = DEFAULT_SEPARATOR) -> FlatRecord:
    """
    Flatten nested objects into a single-level record.

    Object keys are joined with the separator. Arrays are not expanded by
    index; they are kept as one column holding their JSON text.

    Args:
        value: Value to flatten
        prefix: Key prefix for the value's own entries
        separator: String placed between parent and child keys

    Returns:
        Mapping from compound key to rendered value

    Example:
        >>> flatten({"user": {"name": "Alice", "tags": ["a"]}})
        {'user_name': 'Alice', 'user_tags': '["a"]'}
    """
    result: FlatRecord = {}

    if isinstance(value, dict):
        for key, child in value.items():
            compound = f"{prefix}{separator}{key}" if prefix else key
            if isinstance(child, dict):
                result.update(flatten(child, compound, separator))
            else:
                result[compound] = render_scalar(child)
    elif prefix:
        result[prefix] = render_scalar(value)

    return result


def flatten_rows(rows: List[Any], separator: str = DEFAULT_SEPARATOR) -> List[FlatRecord]:
    """
    Flatten every row of a table.

    Raises:
        SerializationError: If a row is not an object
    """
    flattened = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            raise SerializationError(
                f"CSV rows must be objects, row {index + 1} is {type(row).__name__}"
            )
        flattened.append(flatten(row, separator=separator))
    return flattened


def collect_headers(records: List[FlatRecord]) -> List[str]:
    """Sorted union of the keys of all records."""
    headers = set()
    for record in records:
        headers.update(record.keys())
    return sorted(headers)


def infer_type(field: str) -> CanonicalValue:
    """
    Infer the value of a CSV field from its text.

    Rules are applied in order: empty text is null, "true"/"false" in any
    case are booleans, 64-bit integers are ints, finite decimals are
    floats, anything else stays a string. Leading zeros are not kept
    ("007" becomes 7) and "NaN"/"Infinity" stay strings.
    """
    if field == "":
        return None

    lowered = field.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    if _INTEGER_RE.fullmatch(field):
        try:
            number = int(field)
        except ValueError:
            # Longer than the interpreter's digit limit, certainly not int64
            number = None
        if number is not None and INT64_MIN <= number <= INT64_MAX:
            return number

    if _FLOAT_RE.fullmatch(field):
        number = float(field)
        if math.isfinite(number):
            return number

    return field
