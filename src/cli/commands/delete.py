"""Soft-delete or restore a thread for this participant."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_thread_id
from src.cli.utils.runner import open_database, run_async
from src.state import mark_thread_deleted
from src.thread import Thread

console = Console()


async def _mark(thread_id: str, is_deleted: bool) -> Thread:
    config, db = await open_database()
    return await mark_thread_deleted(db, thread_id, config.participant, is_deleted)


def delete_command(thread_id: str, undo: bool, json_flag: bool) -> None:
    """Hide a thread for this participant only; other participants keep it."""
    try:
        thread_id = validate_thread_id(thread_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    thread = run_async(console, _mark(thread_id, not undo), "delete thread")
    state = "restored" if undo else "deleted"

    if json_flag:
        json_output(console, {"status": state, "thread_id": thread.thread_id})
    else:
        format_success(console, f"Thread {thread.thread_id} {state}")
