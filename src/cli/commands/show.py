"""Show a thread with its derived state."""

from datetime import datetime, timezone

import typer
from rich.console import Console
from rich.markup import escape

from src.cli.output import format_error, format_flag, format_key_value, format_table, json_output
from src.cli.utils import validate_thread_id
from src.cli.utils.runner import open_database, run_async
from src.state import export_thread, load_thread
from src.thread import Participant, Thread

console = Console()


async def _show(thread_id: str) -> tuple[Participant, Thread]:
    config, db = await open_database()
    return config.participant, await load_thread(db, thread_id)


def _format_date(timestamp: int) -> str:
    if not timestamp:
        return ""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def show_command(thread_id: str, json_flag: bool) -> None:
    """Show a thread, its participants and messages."""
    try:
        thread_id = validate_thread_id(thread_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    me, thread = run_async(console, _show(thread_id), "show thread")

    if json_flag:
        json_output(
            console,
            {
                **export_thread(thread),
                "is_read": thread.is_read_by_participant(me),
                "is_deleted": thread.is_deleted_by_participant(me),
            },
        )
        return

    format_key_value(
        console,
        {
            "Thread ID": thread.thread_id,
            "Subject": escape(thread.subject),
            "Created": thread.created_at.isoformat()[:19],
            "Read": thread.is_read_by_participant(me),
            "Deleted": thread.is_deleted_by_participant(me),
        },
    )
    format_table(
        console,
        f"Participants ({len(thread.get_participants())})",
        ["ID", "Name", "Deleted", "Last Sent", "Last Received"],
        [
            (
                p.participant_id,
                escape(getattr(p, "name", None) or ""),
                format_flag(thread.is_deleted_by_participant(p)),
                _format_date(thread.get_last_message_date(p, written_by_self=True)),
                _format_date(thread.get_last_message_date(p, written_by_self=False)),
            )
            for p in thread.get_participants()
        ],
    )
    messages = thread.get_messages()
    if not messages:
        console.print("[yellow]No messages yet[/yellow]")
        return
    format_table(
        console,
        f"Messages ({len(messages)})",
        ["ID", "Sender", "Sent", "Read", "Body"],
        [
            (
                m.message_id[:12] + "...",
                m.sender.participant_id,
                _format_date(m.timestamp),
                format_flag(m.is_read_by_participant(me)),
                escape(_truncate(m.body, 60)),
            )
            for m in messages
        ],
        caption=f"Keywords: {thread.keywords}" if thread.keywords else None,
    )


def _truncate(text: str, length: int) -> str:
    return text[:length] + "..." if len(text) > length else text
