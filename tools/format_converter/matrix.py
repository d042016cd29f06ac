"""
Conversion matrix.

Every (source, target) pair maps to a ``ConversionRoute``: the ordered
adapters that reshape the parsed value for the target, followed by the
target's serializer. Two families of pairs need adapting:

- TOML needs a table at the root, so an array is wrapped under ``data``.
  Converting such a document back out of TOML unwraps it again when
  ``data`` is its only key. A hand-written TOML file whose only key is
  ``data`` is unwrapped as well; there is no marker to tell them apart.
- CSV needs rows, so a single object becomes a one-row table and scalars
  are rejected.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Tuple

from shared.logger import get_logger

from .flatten import DEFAULT_SEPARATOR
from .formats import FormatTag
from .parsers import parse
from .serializers import DEFAULT_INDENT, as_rows, serialize
from .values import CanonicalValue

logger = get_logger(__name__)

WRAP_KEY = "data"

Adapter = Callable[[CanonicalValue], CanonicalValue]


def wrap_root_array(value: CanonicalValue, key: str = WRAP_KEY) -> CanonicalValue:
    """Wrap an array under a single key so it can be a TOML table."""
    if isinstance(value, list):
        return {key: value}
    return value


def unwrap_root_array(value: CanonicalValue, key: str = WRAP_KEY) -> CanonicalValue:
    """Undo ``wrap_root_array`` when the object holds nothing but the wrapped array."""
    if isinstance(value, dict) and list(value) == [key] and isinstance(value[key], list):
        return value[key]
    return value


@dataclass(frozen=True)
class ConversionRoute:
    """Adapters and serializer used for one (source, target) pair."""

    source: FormatTag
    target: FormatTag
    adapters: Tuple[Adapter, ...] = field(default_factory=tuple)

    def apply(
        self,
        value: CanonicalValue,
        indent: int = DEFAULT_INDENT,
        separator: str = DEFAULT_SEPARATOR,
    ) -> str:
        """Adapt a parsed value and serialize it to the target format."""
        for adapter in self.adapters:
            value = adapter(value)
        return serialize(value, self.target, indent=indent, separator=separator)

    def run(
        self,
        text: str,
        indent: int = DEFAULT_INDENT,
        separator: str = DEFAULT_SEPARATOR,
    ) -> str:
        """Parse source text and convert it to the target format."""
        return self.apply(parse(text, self.source), indent=indent, separator=separator)


def build_route(
    source: FormatTag,
    target: FormatTag,
    wrap_key: str = WRAP_KEY,
    unwrap_toml: bool = True,
) -> ConversionRoute:
    """
    Build the route for one format pair.

    Args:
        source: Format of the input text
        target: Format of the output text
        wrap_key: Key holding a root array inside TOML
        unwrap_toml: Unwrap a lone ``data`` array when leaving TOML

    Returns:
        ConversionRoute with the adapters the pair needs
    """
    adapters = []

    if source == FormatTag.TOML and target != FormatTag.TOML and unwrap_toml:
        adapters.append(partial(unwrap_root_array, key=wrap_key))

    if target == FormatTag.TOML:
        adapters.append(partial(wrap_root_array, key=wrap_key))
    elif target == FormatTag.CSV:
        adapters.append(as_rows)

    return ConversionRoute(source=source, target=target, adapters=tuple(adapters))


CONVERSION_MATRIX: Dict[Tuple[FormatTag, FormatTag], ConversionRoute] = {
    (source, target): build_route(source, target)
    for source in FormatTag
    for target in FormatTag
}


def get_route(source: FormatTag, target: FormatTag) -> ConversionRoute:
    """Look up the route for a format pair."""
    return CONVERSION_MATRIX[(FormatTag(source), FormatTag(target))]


def convert_value(
    value: CanonicalValue,
    source: FormatTag,
    target: FormatTag,
    indent: int = DEFAULT_INDENT,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Convert an already parsed value as if it had been read from ``source``."""
    return get_route(source, target).apply(value, indent=indent, separator=separator)


def convert(
    source: FormatTag,
    target: FormatTag,
    text: str,
    indent: int = DEFAULT_INDENT,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """
    Convert text from one format to another.

    Args:
        source: Format of the input text
        target: Format of the output text
        text: Input document

    Returns:
        Document in the target format

    Raises:
        ParseError: If the input is not valid for the source format
        SerializationError: If the value cannot be written in the target format

    Example:
        >>> print(convert(FormatTag.CSV, FormatTag.JSON, "a,b\\n1,x"))
        [
          {
            "a": 1,
            "b": "x"
          }
        ]
    """
    logger.debug(f"Converting {source} -> {target} ({len(text)} chars)")
    return get_route(source, target).run(text, indent=indent, separator=separator)
