"""Create a new thread."""

import time

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import validate_message_body, validate_participant_id, validate_subject
from src.cli.utils.runner import open_database, run_async
from src.state import create_thread
from src.thread import Participant, Thread

console = Console()


async def _create_thread(
    subject: str, participant_ids: list[str], body: str | None,
) -> Thread:
    config, db = await open_database()
    return await create_thread(
        db,
        subject=subject,
        creator=config.participant,
        participants=[Participant(pid) for pid in participant_ids],
        body=body,
        timestamp=int(time.time()),
    )


def create_command(
    subject: str,
    participant_ids: list[str] | None,
    body: str | None,
    json_flag: bool,
) -> None:
    """Create a new thread with this participant as creator."""
    try:
        subject = validate_subject(subject)
        participant_ids = [validate_participant_id(p) for p in participant_ids or []]
        if body is not None:
            body = validate_message_body(body)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    thread = run_async(
        console, _create_thread(subject, participant_ids, body), "create thread",
    )

    if json_flag:
        json_output(
            console,
            {
                "status": "created",
                "thread_id": thread.thread_id,
                "subject": thread.subject,
                "participants": thread.get_participants(),
                "messages": len(thread.get_messages()),
            },
        )
    else:
        format_success(console, f"Thread '{thread.subject}' created successfully")
        console.print(f"[cyan]Thread ID:[/cyan]    {thread.thread_id}")
        console.print(
            "[cyan]Participants:[/cyan] "
            + ", ".join(p.participant_id for p in thread.get_participants())
        )
