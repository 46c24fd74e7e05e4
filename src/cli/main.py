"""Main CLI entry point for conversation threads."""

import logging
from typing import List, Optional

import typer
from rich.console import Console

from src.cli.commands.create import create_command
from src.cli.commands.delete import delete_command
from src.cli.commands.export_thread import export_command
from src.cli.commands.import_thread import import_command
from src.cli.commands.init import init_command
from src.cli.commands.post import post_command
from src.cli.commands.read import read_command
from src.cli.commands.show import show_command
from src.cli.utils import log_level_from_env

app = typer.Typer(
    name="threads",
    help="Conversation threads with per-participant read, delete and activity state",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=log_level_from_env(verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("init")
def init(
    participant_id: str = typer.Option(..., "-p", "--participant", help="Participant identifier"),
    name: str = typer.Option(None, "-n", "--name", help="Display name"),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite config"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Initialize the local participant identity."""
    init_command(participant_id, name, force, json_flag)


@app.command("create")
def create(
    subject: str = typer.Option(..., "-s", "--subject", help="Thread subject"),
    participants: Optional[List[str]] = typer.Option(None, "-w", "--with", help="Participant to invite (repeatable)"),
    message: str = typer.Option(None, "-m", "--message", help="First message"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Create a new thread with this participant as creator."""
    create_command(subject, participants, message, json_flag)


@app.command("post")
def post(
    thread_id: str = typer.Option(..., "-t", "--thread", help="Thread ID"),
    message: str = typer.Option(..., "-m", "--message", help="Content"),
    at: int = typer.Option(None, "--at", help="Timestamp (default: now)"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Post a message to a thread."""
    post_command(thread_id, message, at, json_flag)


@app.command("show")
def show(
    thread_id: str = typer.Option(..., "-t", "--thread", help="Thread ID"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a thread with its participants and messages."""
    show_command(thread_id, json_flag)


@app.command("read")
def read(
    thread_id: str = typer.Option(..., "-t", "--thread", help="Thread ID"),
    unread: bool = typer.Option(False, "--unread", help="Mark as unread instead"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Mark a thread as read for this participant."""
    read_command(thread_id, unread, json_flag)


@app.command("delete")
def delete(
    thread_id: str = typer.Option(..., "-t", "--thread", help="Thread ID"),
    undo: bool = typer.Option(False, "--undo", help="Restore a deleted thread"),
    json_flag: bool = typer.Option(False, "--json"),
) -> None:
    """Delete a thread for this participant only."""
    delete_command(thread_id, undo, json_flag)


@app.command("export")
def export_thread_cmd(
    thread_id: str = typer.Option(..., "-t", "--thread", help="Thread ID"),
    output: str = typer.Option(None, "-o", "--output", help="Output file path"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Export a thread to JSON."""
    export_command(thread_id, output, json_flag)


@app.command("import")
def import_thread_cmd(
    input_path: str = typer.Option(..., "-i", "--input", help="JSON file to import"),
    json_flag: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Import a thread from a JSON file."""
    import_command(input_path, json_flag)


def main() -> None:
    """Entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)
