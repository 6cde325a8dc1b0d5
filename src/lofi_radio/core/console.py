"""Centralized Rich Console management and table rendering for the CLI."""

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table

_console: Console | None = None


def get_console() -> Console:
    """Get or create the global Rich Console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console | None) -> None:
    """Swap the shared console (tests record output with Console(record=True))."""
    global _console
    _console = console


def safe_print(message: str, style: str | None = None) -> None:
    """Print using Rich Console with optional styling.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(message, style=style)
    else:
        console.print(message)


def print_table(title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """Render rows as a Rich table with a leading 1-based index column."""
    table = Table(title=title, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    for column in columns:
        table.add_column(column)

    for number, row in enumerate(rows, start=1):
        table.add_row(str(number), *row)

    get_console().print(table)
