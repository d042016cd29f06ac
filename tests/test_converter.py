"""Tests for DataConverter and the file wrapper."""

import json

import pytest
import toml
import yaml

from tools.format_converter.converter import ConverterConfig, DataConverter
from tools.format_converter.errors import (
    ConversionIOError,
    InvalidFormatError,
    ParseError,
    QueryError,
)
from tools.format_converter.formats import FormatTag


class TestDataConverter:
    """Test in-memory conversions."""

    def test_init_default(self):
        """Test initialization with defaults."""
        converter = DataConverter()
        assert converter.config.indent == 2
        assert converter.config.separator == "_"
        assert converter.config.wrap_key == "data"

    def test_convert(self):
        """Test converting text."""
        converter = DataConverter()

        result = converter.convert('{"name":"Alice"}', FormatTag.JSON, FormatTag.YAML)

        assert result == "name: Alice\n"

    def test_convert_with_indent(self):
        """Test that the configured indent is used."""
        converter = DataConverter(ConverterConfig(indent=4))

        result = converter.convert('{"a":1}', FormatTag.YAML, FormatTag.JSON)

        assert result == '{\n    "a": 1\n}'

    def test_custom_wrap_key(self):
        """Test wrapping arrays under a configured key."""
        converter = DataConverter(ConverterConfig(wrap_key="items"))

        toml_text = converter.convert('[{"x":1}]', FormatTag.JSON, FormatTag.TOML)

        assert toml.loads(toml_text) == {"items": [{"x": 1}]}
        assert json.loads(converter.convert(toml_text, FormatTag.TOML, FormatTag.JSON)) == [{"x": 1}]

    def test_unwrap_disabled(self):
        """Test keeping the wrapper key when unwrapping is off."""
        converter = DataConverter(ConverterConfig(unwrap_toml_data=False))

        result = converter.convert("data = [1, 2]\n", FormatTag.TOML, FormatTag.JSON)

        assert json.loads(result) == {"data": [1, 2]}

    def test_custom_separator(self):
        """Test flattening with a configured separator."""
        converter = DataConverter(ConverterConfig(separator="."))

        result = converter.convert('{"a":{"b":1}}', FormatTag.JSON, FormatTag.CSV)

        assert result == "a.b\n1\n"

    def test_convert_propagates_parse_errors(self):
        """Test that parse errors reach the caller."""
        converter = DataConverter()
        with pytest.raises(ParseError):
            converter.convert("{ invalid }", FormatTag.JSON, FormatTag.YAML)

    def test_convert_value(self):
        """Test converting already parsed data."""
        converter = DataConverter()
        result = converter.convert_value([{"a": 1}], FormatTag.JSON, FormatTag.TOML)
        assert toml.loads(result) == {"data": [{"a": 1}]}

    def test_query(self):
        """Test JMESPath queries."""
        converter = DataConverter()
        data = {"users": [{"name": "Alice"}, {"name": "Bob"}]}

        assert converter.query(data, "users[1].name") == "Bob"
        assert converter.query(data, "users[*].name") == ["Alice", "Bob"]

    def test_invalid_query(self):
        """Test that invalid queries fail."""
        converter = DataConverter()
        with pytest.raises(QueryError):
            converter.query({}, "users[")

    def test_convert_text_with_query(self):
        """Test narrowing a document before converting."""
        converter = DataConverter()
        text = '{"users": [{"name": "Alice", "age": 30}, {"name": "Bob", "age": 25}]}'

        result = converter.convert_text(text, FormatTag.JSON, FormatTag.CSV, query="users")

        assert result == "age,name\n30,Alice\n25,Bob\n"


class TestFileConversion:
    """Test the file wrapper."""

    def test_convert_file_json_to_yaml(self, tmp_path):
        """Test converting a file by extension."""
        input_path = tmp_path / "input.json"
        output_path = tmp_path / "output.yaml"
        input_path.write_text('{"name":"Alice","age":30}', encoding="utf-8")

        DataConverter().convert_file(input_path, output_path)

        assert yaml.safe_load(output_path.read_text(encoding="utf-8")) == {"name": "Alice", "age": 30}

    def test_convert_file_csv_to_json(self, tmp_path):
        """Test converting CSV rows to JSON."""
        input_path = tmp_path / "data.csv"
        output_path = tmp_path / "data.json"
        input_path.write_text("name,age\nBob,25", encoding="utf-8")

        result = DataConverter().convert_file(str(input_path), str(output_path))

        assert json.loads(output_path.read_text(encoding="utf-8")) == [{"name": "Bob", "age": 25}]
        assert result == output_path.read_text(encoding="utf-8")

    def test_convert_file_yml_extension(self, tmp_path):
        """Test that .yml files are read as YAML."""
        input_path = tmp_path / "config.yml"
        output_path = tmp_path / "config.toml"
        input_path.write_text("title: Hello\n", encoding="utf-8")

        DataConverter().convert_file(input_path, output_path)

        assert toml.loads(output_path.read_text(encoding="utf-8")) == {"title": "Hello"}

    def test_explicit_formats_override_extensions(self, tmp_path):
        """Test giving formats explicitly."""
        input_path = tmp_path / "input.txt"
        output_path = tmp_path / "output.txt"
        input_path.write_text("a,b\n1,2\n", encoding="utf-8")

        DataConverter().convert_file(
            input_path,
            output_path,
            from_format=FormatTag.CSV,
            to_format=FormatTag.JSON,
        )

        assert json.loads(output_path.read_text(encoding="utf-8")) == [{"a": 1, "b": 2}]

    def test_missing_extension(self, tmp_path):
        """Test that files without extension are rejected."""
        with pytest.raises(InvalidFormatError) as exc_info:
            DataConverter().convert_file(tmp_path / "noext", tmp_path / "output.json")

        assert "extension" in str(exc_info.value)

    def test_unknown_format(self, tmp_path):
        """Test that unknown extensions are rejected."""
        with pytest.raises(ParseError, match="Unknown format"):
            DataConverter().convert_file(tmp_path / "input.xml", tmp_path / "output.json")

    def test_nonexistent_input(self, tmp_path):
        """Test that read failures are IO errors."""
        with pytest.raises(ConversionIOError) as exc_info:
            DataConverter().convert_file(tmp_path / "nonexistent.json", tmp_path / "output.yaml")

        assert "Error reading" in str(exc_info.value)

    def test_unwritable_output(self, tmp_path):
        """Test that write failures are IO errors."""
        input_path = tmp_path / "input.json"
        input_path.write_text("{}", encoding="utf-8")

        with pytest.raises(ConversionIOError, match="Error writing"):
            DataConverter().convert_file(input_path, tmp_path / "missing" / "output.yaml")

    def test_invalid_input_writes_nothing(self, tmp_path):
        """Test that no output file is created on parse failure."""
        input_path = tmp_path / "input.json"
        output_path = tmp_path / "output.yaml"
        input_path.write_text("{ broken", encoding="utf-8")

        with pytest.raises(ParseError):
            DataConverter().convert_file(input_path, output_path)

        assert not output_path.exists()

    def test_load_file(self, tmp_path):
        """Test loading a file into canonical values."""
        input_path = tmp_path / "data.toml"
        input_path.write_text("count = 3\n", encoding="utf-8")

        assert DataConverter().load_file(input_path) == {"count": 3}

    def test_convert_file_with_query(self, tmp_path):
        """Test querying while converting a file."""
        input_path = tmp_path / "users.json"
        output_path = tmp_path / "first.yaml"
        input_path.write_text('{"users": [{"name": "Alice"}, {"name": "Bob"}]}', encoding="utf-8")

        DataConverter().convert_file(input_path, output_path, query="users[0]")

        assert yaml.safe_load(output_path.read_text(encoding="utf-8")) == {"name": "Alice"}
