"""Post a message to a thread."""

import time

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_message_body, validate_thread_id, validate_timestamp
from src.cli.utils.runner import open_database, run_async
from src.state import post_message
from src.thread import Message

console = Console()


async def _post(thread_id: str, body: str, timestamp: int) -> Message:
    config, db = await open_database()
    return await post_message(db, thread_id, config.participant, body, timestamp)


def post_command(
    thread_id: str,
    body: str,
    at: int | None,
    json_flag: bool,
) -> None:
    """Post a message to a thread as this participant."""
    try:
        thread_id = validate_thread_id(thread_id)
        body = validate_message_body(body)
        timestamp = validate_timestamp(at) if at is not None else int(time.time())
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    message = run_async(console, _post(thread_id, body, timestamp), "post message")

    if json_flag:
        json_output(
            console,
            {
                "status": "posted",
                "thread_id": thread_id,
                "message_id": message.message_id,
                "sender": message.sender.participant_id,
                "timestamp": message.timestamp,
            },
        )
    else:
        format_success(console, "Message posted")
        console.print(f"[cyan]Message ID:[/cyan] {message.message_id}")
