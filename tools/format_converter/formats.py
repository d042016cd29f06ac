"""Supported serialization formats."""

from enum import Enum
from pathlib import Path
from typing import Dict, Tuple, Union

from .errors import InvalidFormatError


class FormatTag(str, Enum):
    """Supported conversion formats."""

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"
    CSV = "csv"

    @classmethod
    def from_string(cls, name: str) -> "FormatTag":
        """
        Resolve a format name or file extension, case-insensitively.

        Args:
            name: Format name such as "json", "YML" or "csv"

        Returns:
            Matching FormatTag

        Raises:
            InvalidFormatError: If the name is not a known format
        """
        tag = _ALIASES.get(name.strip().lower())
        if tag is None:
            raise InvalidFormatError(f"Unknown format: {name}")
        return tag

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FormatTag":
        """
        Resolve the format of a file from its extension.

        Raises:
            InvalidFormatError: If the file has no extension or an unknown one
        """
        suffix = Path(path).suffix
        if not suffix:
            raise InvalidFormatError(f"No file extension found: {path}")
        return cls.from_string(suffix[1:])

    @property
    def aliases(self) -> Tuple[str, ...]:
        """Every name that resolves to this format."""
        return tuple(name for name, tag in _ALIASES.items() if tag is self)

    def __str__(self) -> str:
        return self.value


_ALIASES: Dict[str, FormatTag] = {
    "json": FormatTag.JSON,
    "toml": FormatTag.TOML,
    "yaml": FormatTag.YAML,
    "yml": FormatTag.YAML,
    "csv": FormatTag.CSV,
}
