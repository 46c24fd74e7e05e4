"""Export a thread to JSON."""

from pathlib import Path

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_thread_id
from src.cli.utils.runner import open_database, run_async
from src.state import export_thread, export_thread_to_file, load_thread

console = Console()


async def _export(thread_id: str, output_path: Path | None) -> dict:
    """Export a thread, optionally writing it to a file."""
    _, db = await open_database()
    thread = await load_thread(db, thread_id)
    if output_path:
        export_thread_to_file(thread, output_path)
    return export_thread(thread)


def export_command(
    thread_id: str,
    output: str | None,
    json_flag: bool,
) -> None:
    """Export a thread to JSON."""
    try:
        thread_id = validate_thread_id(thread_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)
    output_path = Path(output) if output else None

    state = run_async(console, _export(thread_id, output_path), "export thread")

    if json_flag or not output_path:
        json_output(console, state)
        return

    format_success(console, f"Thread exported to {output_path}")
    console.print(f"[cyan]Schema:[/cyan]       {state.get('schema_version', 'unknown')}")
    console.print(f"[cyan]Participants:[/cyan] {len(state.get('participants', []))}")
    console.print(f"[cyan]Messages:[/cyan]     {len(state.get('messages', []))}")
