"""CLI interface for the Format Converter."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.syntax import Syntax

from shared.cli import console, create_table, error, handle_errors, info, print_table, success, warning
from shared.logger import setup_logger

from . import __version__
from .converter import ConverterConfig, DataConverter
from .diagnostics import is_probable_format_mismatch, is_syntax_error, locate_error
from .errors import FormatError, ParseError
from .formats import FormatTag

FORMAT_CHOICES = ["json", "yaml", "yml", "toml", "csv"]

# Lines shown around the failing line
CONTEXT_LINES = 2


def display_parse_error(
    converter: DataConverter,
    exc: ParseError,
    input_file: Path,
    source_format: FormatTag,
) -> None:
    """
    Point at the failing input line, or hint at a wrong format.

    Args:
        converter: Converter used for the conversion
        exc: Parse error raised for the input
        input_file: File that failed to parse
        source_format: Format the file was parsed as
    """
    threshold = converter.config.mismatch_column_threshold
    if is_probable_format_mismatch(exc, threshold):
        warning(
            f"{input_file.name} does not look like {source_format.value.upper()}; "
            "check the file extension or pass --from"
        )
        return

    if not is_syntax_error(exc, threshold):
        return
    location = locate_error(exc)

    try:
        text = converter.read_text(input_file)
    except FormatError:
        return

    lexer = "text" if source_format == FormatTag.CSV else source_format.value
    syntax = Syntax(
        text,
        lexer,
        line_numbers=True,
        line_range=(max(1, location.line - CONTEXT_LINES), location.line + CONTEXT_LINES),
        highlight_lines={location.line},
    )
    console.print(syntax)


@click.group(context_settings={"auto_envvar_prefix": "CONVRS"})
@click.version_option(version=__version__, prog_name="convrs")
def main():
    """Format-Converter for JSON, YAML, TOML and CSV."""


@main.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="Input file (format detected from the extension)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (print to stdout if not specified)",
)
@click.option(
    "--from",
    "-f",
    "from_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Source format (detected from the input extension if not specified)",
)
@click.option(
    "--to",
    "-t",
    "to_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    help="Target format (detected from the output extension if not specified)",
)
@click.option(
    "--query",
    "-q",
    help="JMESPath query to extract data before converting",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="Indentation level (JSON and YAML)",
)
@click.option(
    "--separator",
    default="_",
    show_default=True,
    help="Separator for flattened CSV column names",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def convert(
    input_file: Path,
    output: Optional[Path],
    from_format: Optional[str],
    to_format: Optional[str],
    query: Optional[str],
    indent: int,
    separator: str,
    verbose: bool,
):
    """
    Convert a file between JSON, YAML, TOML and CSV.

    Examples:

        \b
        # Convert JSON to YAML
        convrs convert --input config.json --output config.yaml

        \b
        # CSV rows to a TOML array of tables
        convrs convert -i users.csv -o users.toml

        \b
        # Print to stdout
        convrs convert -i data.yaml --to json

        \b
        # Query and convert
        convrs convert -i users.json -o first.yaml --query 'users[0]'
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "WARNING"
    setup_logger("tools", level=log_level)

    converter = DataConverter(ConverterConfig(indent=indent, separator=separator))

    source_format: Optional[FormatTag] = None
    try:
        source_format = FormatTag.from_string(from_format) if from_format else FormatTag.from_path(input_file)
        target_format = FormatTag.from_string(to_format) if to_format else None

        if output:
            if verbose:
                info(f"Converting {input_file} ({source_format.value}) to {output}")
            converter.convert_file(
                input_file,
                output,
                from_format=source_format,
                to_format=target_format,
                query=query,
            )
            success(f"Conversion successful: {input_file} -> {output}")
        else:
            if target_format is None:
                raise click.UsageError("--to is required when no --output file is given")
            output_data = converter.convert_text(
                converter.read_text(input_file),
                source_format,
                target_format,
                query=query,
            )
            click.echo(output_data)

        sys.exit(0)

    except ParseError as e:
        error(str(e))
        if source_format is not None:
            display_parse_error(converter, e, input_file, source_format)
        sys.exit(1)

    except FormatError as e:
        error(str(e))
        sys.exit(1)

    except click.UsageError:
        raise

    except Exception as e:
        error(f"Unexpected error: {e}")
        if verbose:
            raise
        sys.exit(1)


@main.command()
def formats():
    """List supported formats and their file extensions."""
    table = create_table(title="Supported formats")
    table.add_column("Format", style="bold cyan")
    table.add_column("Extensions", style="yellow")
    table.add_column("Root", style="dim")

    roots = {
        FormatTag.JSON: "any value",
        FormatTag.YAML: "any value",
        FormatTag.TOML: "table (arrays wrapped under 'data')",
        FormatTag.CSV: "array of objects",
    }
    for tag in FormatTag:
        table.add_row(tag.value.upper(), ", ".join(f".{alias}" for alias in tag.aliases), roots[tag])

    print_table(table)


if __name__ == "__main__":
    main()
