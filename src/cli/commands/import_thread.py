"""Import a thread from a JSON export."""

from pathlib import Path

from rich.console import Console

from src.cli.output import format_success, json_output
from src.cli.utils.runner import open_database, run_async
from src.state import import_thread_from_file, save_thread
from src.thread import Thread

console = Console()


async def _import(input_path: Path) -> Thread:
    thread = import_thread_from_file(input_path)
    _, db = await open_database()
    await save_thread(db, thread)
    return thread


def import_command(input_path: str, json_flag: bool) -> None:
    """Import a thread, replacing any stored thread with the same ID."""
    path = Path(input_path)
    thread = run_async(console, _import(path), "import thread")

    if json_flag:
        json_output(
            console,
            {
                "status": "imported",
                "thread_id": thread.thread_id,
                "participants": len(thread.get_participants()),
                "messages": len(thread.get_messages()),
            },
        )
    else:
        format_success(console, f"Thread {thread.thread_id} imported from {path}")
