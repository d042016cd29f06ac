"""Encode canonical values as text of each format."""

import csv
import io
import json
import re
from typing import Any, Callable, Dict, List

import toml
import yaml

from shared.logger import get_logger

from .errors import FormatError, SerializationError
from .flatten import DEFAULT_SEPARATOR, collect_headers, flatten_rows
from .formats import FormatTag
from .values import CanonicalValue, ValueKind, is_finite_number, kind_of

logger = get_logger(__name__)

DEFAULT_INDENT = 2


def serialize_json(value: CanonicalValue, indent: int = DEFAULT_INDENT) -> str:
    """Pretty-print any value as JSON."""
    try:
        return json.dumps(value, indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise SerializationError(f"Error formatting JSON: {e}")


def serialize_yaml(value: CanonicalValue, indent: int = DEFAULT_INDENT) -> str:
    """Render any value as block-style YAML, keeping key order."""
    return yaml.safe_dump(
        value,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        indent=indent,
    )


def serialize_toml(value: CanonicalValue, indent: int = DEFAULT_INDENT) -> str:
    """
    Render an object as TOML.

    TOML has no null, so nulls are written as empty strings. This loses
    information on purpose rather than failing the conversion. Arrays must
    hold a single type, which also applies after nulls become strings.

    Raises:
        SerializationError: If the root is not an object, a number is NaN
            or infinite, an array mixes types or a key cannot be written
    """
    if kind_of(value) is not ValueKind.OBJECT:
        raise SerializationError(
            f"TOML requires a table at the root, got {kind_of(value).value}"
        )
    return toml.dumps(_to_toml_value(value, "$"), encoder=TomlWriter())


class TomlWriter(toml.TomlEncoder):
    """
    ``toml`` encoder that writes every canonical value faithfully.

    Strings use TOML escapes instead of Python's ``repr`` escapes, and
    objects nested in arrays of arrays become inline tables instead of
    being iterated like lists.
    """

    def __init__(self):
        super().__init__(dict)
        self.dump_funcs[str] = _dump_toml_string

    def dump_value(self, v):
        if isinstance(v, dict):
            return self.dump_inline_table(v)
        return super().dump_value(v)

    def dump_inline_table(self, section):
        if not isinstance(section, dict):
            return str(self.dump_value(section))
        items = ", ".join(
            f"{_dump_toml_key(key)} = {self.dump_value(child)}" for key, child in section.items()
        )
        return "{ " + items + " }" if items else "{}"


_TOML_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}

_BARE_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")


def _dump_toml_string(value: str) -> str:
    """Quote a string as a TOML basic string."""
    chars = []
    for char in value:
        if char in _TOML_ESCAPES:
            chars.append(_TOML_ESCAPES[char])
        elif _is_control(char):
            chars.append(f"\\u{ord(char):04x}")
        else:
            chars.append(char)
    return '"' + "".join(chars) + '"'


def _dump_toml_key(key: str) -> str:
    return key if _BARE_KEY_RE.fullmatch(key) else _dump_toml_string(key)


def _is_control(char: str) -> bool:
    return ord(char) < 0x20 or ord(char) == 0x7F


def _toml_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "table"


def _to_toml_value(value: Any, path: str) -> Any:
    if value is None:
        return ""
    if isinstance(value, dict):
        table = {}
        for key, child in value.items():
            # Table headers are quoted by toml itself, which only handles printable keys
            if "\\" in key or any(_is_control(char) for char in key):
                raise SerializationError(f"Unsupported TOML key at {path}: {key!r}")
            table[key] = _to_toml_value(child, f"{path}.{key}")
        return table
    if isinstance(value, list):
        items = [_to_toml_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
        types = sorted({_toml_type(item) for item in items})
        if len(types) > 1:
            raise SerializationError(
                f"TOML arrays must hold a single type, {path} mixes {' and '.join(types)}"
            )
        return items
    if not is_finite_number(value):
        raise SerializationError(f"Invalid number for TOML at {path}: {value}")
    return value


def serialize_csv(value: CanonicalValue, separator: str = DEFAULT_SEPARATOR) -> str:
    """
    Render a list of objects as CSV.

    A bare object is written as a single row. Nested objects are
    flattened into compound column names; the header is the sorted union
    of all columns and rows without a column get an empty field.

    Raises:
        SerializationError: If the value is a scalar or a row is not an object
    """
    rows = as_rows(value)
    if not rows:
        return ""

    records = flatten_rows(rows, separator=separator)
    headers = collect_headers(records)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow([record.get(header, "") for header in headers])

    logger.debug(f"Wrote {len(records)} CSV row(s) with {len(headers)} column(s)")
    return buffer.getvalue()


def as_rows(value: CanonicalValue) -> List[Any]:
    """
    Normalize a value into a list of rows for CSV output.

    Raises:
        SerializationError: If the value is neither a list nor an object
    """
    kind = kind_of(value)
    if kind is ValueKind.ARRAY:
        return value
    if kind is ValueKind.OBJECT:
        return [value]
    raise SerializationError(f"CSV requires an array or object, got {kind.value}")


SERIALIZERS: Dict[FormatTag, Callable[[CanonicalValue], str]] = {
    FormatTag.JSON: serialize_json,
    FormatTag.YAML: serialize_yaml,
    FormatTag.TOML: serialize_toml,
    FormatTag.CSV: serialize_csv,
}


def serialize(
    value: CanonicalValue,
    tag: FormatTag,
    indent: int = DEFAULT_INDENT,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """
    Serialize a canonical value to the given format.

    Args:
        value: Value to encode
        tag: Target format
        indent: Indentation for JSON and YAML
        separator: Key separator for flattened CSV columns

    Returns:
        Encoded text

    Raises:
        SerializationError: If the value cannot be represented in the format
    """
    try:
        if tag == FormatTag.CSV:
            return serialize_csv(value, separator=separator)
        return SERIALIZERS[tag](value, indent=indent)
    except FormatError:
        raise
    except Exception as e:
        logger.debug(f"Unexpected {tag.value} serializer failure: {e!r}")
        raise SerializationError(f"Error formatting {tag.value.upper()}: {e}")
