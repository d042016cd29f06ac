"""Console helpers shared by the CLIs."""

import functools
import sys
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Status messages go to stderr so command output on stdout stays pipeable
console = Console(stderr=True, soft_wrap=True)


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]✗ Error:[/bold red] {escape(message)}")


def create_table(title: Optional[str] = None) -> Table:
    """Create a table with the common style."""
    return Table(title=title, show_header=True, header_style="bold magenta")


def print_table(table: Table) -> None:
    """Print a table to stdout."""
    Console().print(table)


def handle_errors(func: Callable) -> Callable:
    """Exit cleanly with code 130 when the user interrupts a command."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            error("Interrupted")
            sys.exit(130)

    return wrapper
