"""
Canonical value model.

Every parser produces, and every serializer consumes, plain Python values
drawn from a closed set:

    None, bool, int (signed 64-bit), float, str, list, dict[str, ...]

Libraries hand back richer types (datetimes from TOML and YAML, dict
subclasses, huge integers); ``canonicalize`` folds them into that set so the
rest of the pipeline only has to handle six shapes.
"""

import base64
import json
import math
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Union

from .errors import ParseError, SerializationError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

CanonicalValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class ValueKind(str, Enum):
    """Variants of the canonical value model."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    """
    Return the canonical variant of a value.

    Raises:
        SerializationError: If the value is outside the canonical set
    """
    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise SerializationError(f"Unsupported value type: {type(value).__name__}")


def is_finite_number(value: Any) -> bool:
    """True unless the value is a NaN or infinite float."""
    return not isinstance(value, float) or math.isfinite(value)


def canonicalize(value: Any) -> CanonicalValue:
    """
    Fold a value produced by a format library into the canonical model.

    Args:
        value: Parsed data of any supported library type

    Returns:
        Equivalent value built only from canonical types

    Raises:
        ParseError: If an integer is too large for any numeric variant
        SerializationError: If the value has a type with no canonical form
    """
    if value is None or isinstance(value, (bool, str)):
        return value

    if isinstance(value, int):
        return _canonical_int(value)

    if isinstance(value, float):
        return float(value)

    if isinstance(value, dict):
        # Later keys win, same as the underlying mapping
        return {_canonical_key(k): canonicalize(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]

    if isinstance(value, (set, frozenset)):
        return [canonicalize(item) for item in sorted(value, key=str)]

    # datetime is a date subclass
    if isinstance(value, (date, time)):
        return value.isoformat()

    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")

    raise SerializationError(f"Unsupported value type: {type(value).__name__}")


def _canonical_int(value: int) -> Union[int, float]:
    if INT64_MIN <= value <= INT64_MAX:
        return int(value)
    try:
        return float(value)
    except OverflowError:
        raise ParseError(f"Number out of range: {value}")


def _canonical_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (date, time)):
        return key.isoformat()
    return str(key)


def to_compact_json(value: CanonicalValue) -> str:
    """Render a value as single-line JSON text without extra whitespace."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
