"""Mark a thread as read or unread."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_thread_id
from src.cli.utils.runner import open_database, run_async
from src.state import mark_thread_read
from src.thread import Thread

console = Console()


async def _mark(thread_id: str, is_read: bool) -> Thread:
    config, db = await open_database()
    return await mark_thread_read(db, thread_id, config.participant, is_read)


def read_command(thread_id: str, unread: bool, json_flag: bool) -> None:
    """Mark every message of a thread as read (or unread) for this participant."""
    try:
        thread_id = validate_thread_id(thread_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    thread = run_async(console, _mark(thread_id, not unread), "mark thread")
    state = "unread" if unread else "read"

    if json_flag:
        json_output(
            console,
            {"status": state, "thread_id": thread.thread_id,
             "messages": len(thread.get_messages())},
        )
    else:
        format_success(console, f"Thread {thread.thread_id} marked as {state}")
