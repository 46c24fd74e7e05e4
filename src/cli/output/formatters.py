"""Rich terminal output formatters.

Free text (subjects, bodies, error details) is escaped before printing so
square brackets are shown as typed instead of being read as markup.
"""

from typing import Any, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

PLACEHOLDER = "-"


def format_success(console: Console, message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def format_error(console: Console, message: str, hint: str | None = None) -> None:
    """Print an error line, and a hint line below it when given."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    if hint:
        console.print(f"[yellow]Hint:[/yellow] {escape(hint)}")


def format_flag(value: bool) -> str:
    """Render a per-participant flag as a coloured yes/no cell."""
    return "[green]yes[/green]" if value else "[dim]no[/dim]"


def format_table(
    console: Console,
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[Optional[str]]],
    caption: str | None = None,
) -> None:
    """Print rows as a table.

    Empty or missing cells show the placeholder. The ID column never wraps
    so identifiers stay copyable.
    """
    table = Table(title=title, caption=caption, caption_justify="left")
    for col in columns:
        table.add_column(col, no_wrap=col == "ID")
    for row in rows:
        table.add_row(*(cell or PLACEHOLDER for cell in row))
    console.print(table)


def format_key_value(console: Console, data: dict[str, Any]) -> None:
    """Print aligned label/value lines; booleans render as flags."""
    width = max(map(len, data), default=0)
    for key, value in data.items():
        if isinstance(value, bool):
            value = format_flag(value)
        elif value is None or value == "":
            value = PLACEHOLDER
        console.print(f"[cyan]{key.ljust(width)}[/cyan]: {value}")
