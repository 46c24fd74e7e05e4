"""Thread persistence service.

Convenience functions that load a thread aggregate, apply one mutation
and save it back through the ThreadRepository. Used by the CLI commands.
Concurrent writers to the same thread are not serialized here.
"""
import logging
import time
from typing import Iterable, Optional

from src.state.database import DatabaseManager
from src.state.repositories.threads import ThreadRepository
from src.thread import Message, NotAParticipantError, Participant, Thread

logger = logging.getLogger(__name__)


class ThreadNotFoundError(Exception):
    """No thread is stored under the requested ID."""

    def __init__(self, thread_id: str) -> None:
        super().__init__(f"Thread not found: {thread_id}")
        self.thread_id = thread_id


async def load_thread(db_manager: DatabaseManager, thread_id: str) -> Thread:
    """Load a thread or raise ThreadNotFoundError."""
    async with db_manager.connection() as conn:
        thread = await ThreadRepository(conn).get_by_id(thread_id)
    if thread is None:
        raise ThreadNotFoundError(thread_id)
    return thread


async def save_thread(db_manager: DatabaseManager, thread: Thread) -> None:
    async with db_manager.connection() as conn:
        await ThreadRepository(conn).save(thread)


async def create_thread(
    db_manager: DatabaseManager,
    subject: str,
    creator: Participant,
    participants: Iterable[Participant] = (),
    body: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> Thread:
    """Create and persist a new thread.

    Args:
        db_manager: Database connection manager.
        subject: The thread subject.
        creator: The participant starting the conversation.
        participants: Other participants to invite.
        body: Optional first message, written by the creator.
        timestamp: Timestamp of the first message.

    Returns:
        The persisted thread.
    """
    thread = Thread(subject=subject)
    thread.add_participant(creator)
    for participant in participants:
        thread.add_participant(participant)
    if body is not None:
        thread.add_message(Message(
            sender=creator, body=body,
            timestamp=timestamp if timestamp is not None else int(time.time()),
        ))
    else:
        thread.denormalize()
    await save_thread(db_manager, thread)
    logger.info(
        "Created thread=%s creator=%s participants=%d",
        thread.thread_id, creator.participant_id, len(thread.get_participants()),
    )
    return thread


async def post_message(
    db_manager: DatabaseManager,
    thread_id: str,
    sender: Participant,
    body: str,
    timestamp: int,
) -> Message:
    """Append a message to a stored thread and persist the result.

    A named sender replaces a nameless entry stored under the same id, so
    participants invited by id pick up their display name on first post.
    """
    thread = await load_thread(db_manager, thread_id)
    if getattr(sender, "name", None):
        thread.update_participant(sender)
    message = Message(sender=sender, body=body, timestamp=timestamp)
    thread.add_message(message)
    await save_thread(db_manager, thread)
    logger.info(
        "Posted message=%s to thread=%s sender=%s",
        message.message_id, thread_id, sender.participant_id,
    )
    return message


async def mark_thread_read(
    db_manager: DatabaseManager,
    thread_id: str,
    participant: Participant,
    is_read: bool = True,
) -> Thread:
    """Mark every message of a thread as read (or unread) by a participant."""
    thread = await load_thread(db_manager, thread_id)
    _require_participant(thread, participant)
    thread.set_is_read_by_participant(participant, is_read)
    await save_thread(db_manager, thread)
    logger.info(
        "Marked thread=%s %s for participant=%s",
        thread_id, "read" if is_read else "unread", participant.participant_id,
    )
    return thread


async def mark_thread_deleted(
    db_manager: DatabaseManager,
    thread_id: str,
    participant: Participant,
    is_deleted: bool = True,
) -> Thread:
    """Soft-delete (or restore) a thread for one participant."""
    thread = await load_thread(db_manager, thread_id)
    _require_participant(thread, participant)
    thread.set_is_deleted_by_participant(participant, is_deleted)
    await save_thread(db_manager, thread)
    logger.info(
        "Marked thread=%s %s for participant=%s",
        thread_id, "deleted" if is_deleted else "restored",
        participant.participant_id,
    )
    return thread


def _require_participant(thread: Thread, participant: Participant) -> None:
    # Only participants have a row to store per-participant flags in.
    if not thread.is_participant(participant):
        raise NotAParticipantError(thread.thread_id, participant.participant_id)
