"""Tests for the canonical value model."""

import math
from collections import OrderedDict
from datetime import date, datetime

import pytest

from tools.format_converter.errors import ParseError, SerializationError
from tools.format_converter.values import (
    INT64_MAX,
    ValueKind,
    canonicalize,
    is_finite_number,
    kind_of,
    to_compact_json,
)


class TestKindOf:
    """Test variant detection."""

    def test_scalars(self):
        """Test scalar variants."""
        assert kind_of(None) == ValueKind.NULL
        assert kind_of(True) == ValueKind.BOOL
        assert kind_of(1) == ValueKind.NUMBER
        assert kind_of(1.5) == ValueKind.NUMBER
        assert kind_of("x") == ValueKind.STRING

    def test_bool_is_not_number(self):
        """Test that booleans are never numbers."""
        assert kind_of(False) == ValueKind.BOOL

    def test_containers(self):
        """Test recursive variants."""
        assert kind_of([]) == ValueKind.ARRAY
        assert kind_of({}) == ValueKind.OBJECT

    def test_unsupported_type(self):
        """Test that foreign types are rejected."""
        with pytest.raises(SerializationError):
            kind_of(object())


class TestCanonicalize:
    """Test folding library output into the canonical model."""

    def test_plain_values_unchanged(self):
        """Test that canonical values pass through."""
        data = {"a": [1, 2.5, "x", None, True], "b": {"c": False}}
        assert canonicalize(data) == data

    def test_dict_subclass(self):
        """Test that dict subclasses become plain dicts."""
        result = canonicalize(OrderedDict([("b", 1), ("a", 2)]))
        assert type(result) is dict
        assert list(result) == ["b", "a"]

    def test_non_string_keys(self):
        """Test that keys are rendered as text."""
        result = canonicalize({2: "two", False: "no", None: "nothing"})
        assert result == {"2": "two", "false": "no", "null": "nothing"}

    def test_dates(self):
        """Test that dates become ISO text."""
        assert canonicalize(date(2024, 1, 15)) == "2024-01-15"
        assert canonicalize(datetime(2024, 1, 15, 8, 30)) == "2024-01-15T08:30:00"

    def test_tuple_and_set(self):
        """Test that tuples and sets become lists."""
        assert canonicalize((1, 2)) == [1, 2]
        assert canonicalize({"b", "a"}) == ["a", "b"]

    def test_bytes(self):
        """Test that binary data becomes base64 text."""
        assert canonicalize(b"hi") == "aGk="

    def test_int64_kept(self):
        """Test that 64-bit integers stay integers."""
        assert canonicalize(INT64_MAX) == INT64_MAX
        assert isinstance(canonicalize(INT64_MAX), int)

    def test_large_int_becomes_float(self):
        """Test that integers beyond 64 bits become floats."""
        result = canonicalize(2**70)
        assert isinstance(result, float)
        assert result == float(2**70)

    def test_huge_int_fails(self):
        """Test that integers beyond float range fail."""
        with pytest.raises(ParseError, match="out of range"):
            canonicalize(10**400)

    def test_unsupported_type(self):
        """Test that unknown objects are rejected."""
        with pytest.raises(SerializationError):
            canonicalize(object())


class TestHelpers:
    """Test small value helpers."""

    def test_is_finite_number(self):
        """Test finiteness checks."""
        assert is_finite_number(1)
        assert is_finite_number(1.5)
        assert is_finite_number("nan")
        assert not is_finite_number(math.nan)
        assert not is_finite_number(math.inf)

    def test_compact_json(self):
        """Test compact JSON rendering."""
        assert to_compact_json({"a": [1, "ü"]}) == '{"a":[1,"ü"]}'
