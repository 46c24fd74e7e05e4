"""Thread export and import."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.thread import Message, Participant, Thread

_CURRENT_SCHEMA_VERSION = "1.0.0"
_SUPPORTED_IMPORT_VERSIONS = {"1.0.0"}


class ThreadImportError(Exception): pass


class ParticipantSnapshot(BaseModel):
    participant_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    is_deleted: Optional[bool] = None
    last_message_written_by_self: Optional[int] = Field(default=None, ge=0)
    last_message_written_by_others: Optional[int] = Field(default=None, ge=0)


class MessageSnapshot(BaseModel):
    message_id: str = Field(..., min_length=1)
    sender_id: str = Field(..., min_length=1)
    body: str
    timestamp: int = Field(..., ge=0)
    read_by: dict[str, bool] = Field(default_factory=dict)


class ThreadSnapshot(BaseModel):
    schema_version: str
    thread_id: str = Field(..., min_length=1)
    subject: str = ""
    created_at: datetime
    keywords: str = ""
    participants: list[ParticipantSnapshot] = Field(default_factory=list)
    messages: list[MessageSnapshot] = Field(default_factory=list)

    @field_validator("thread_id")
    @classmethod
    def validate_thread_id(cls, v: str) -> str:
        try:
            return str(UUID(v))
        except ValueError as e:
            raise ValueError("Thread ID must be a valid UUID") from e

    @field_validator("messages")
    @classmethod
    def validate_unique_message_ids(
        cls, v: list[MessageSnapshot],
    ) -> list[MessageSnapshot]:
        seen = set()
        for m in v:
            if m.message_id in seen:
                raise ValueError(f"Duplicate message ID: {m.message_id}")
            seen.add(m.message_id)
        return v


def export_thread(thread: Thread) -> dict[str, Any]:
    deleted = thread.is_deleted_by_participant_map
    own = thread.dates_of_last_message_written_by_participant
    other = thread.dates_of_last_message_written_by_other_participant
    return {
        "schema_version": _CURRENT_SCHEMA_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "thread_id": thread.thread_id,
        "subject": thread.subject,
        "created_at": thread.created_at.isoformat(),
        "keywords": thread.keywords,
        "participants": [
            {
                "participant_id": p.participant_id,
                "name": getattr(p, "name", None),
                "is_deleted": deleted.get(p.participant_id),
                "last_message_written_by_self": own.get(p.participant_id),
                "last_message_written_by_others": other.get(p.participant_id),
            }
            for p in thread.get_participants()
        ],
        "messages": [
            {
                "message_id": m.message_id,
                "sender_id": m.sender.participant_id,
                "body": m.body,
                "timestamp": m.timestamp,
                "read_by": m.read_flags,
            }
            for m in thread.get_messages()
        ],
    }


def export_thread_to_file(thread: Thread, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f: json.dump(export_thread(thread), f, indent=2)


def import_thread(state: dict[str, Any]) -> Thread:
    """Rebuild a thread from an exported document.

    Derived state is taken from the document and then completed by one
    denormalization run, so documents written by older exports (or by
    hand) still satisfy every thread invariant.

    Raises:
        ThreadImportError: Unsupported version or invalid document.
    """
    version = state.get("schema_version", "")
    if version not in _SUPPORTED_IMPORT_VERSIONS:
        raise ThreadImportError(f"Unsupported schema version: {version}")
    try:
        snapshot = ThreadSnapshot.model_validate(state)
    except ValidationError as e:
        raise ThreadImportError(f"Invalid thread document: {e}") from e

    participants = {
        p.participant_id: Participant(p.participant_id, p.name)
        for p in snapshot.participants
    }
    messages = []
    for m in snapshot.messages:
        sender = participants.setdefault(m.sender_id, Participant(m.sender_id))
        message = Message(
            sender=sender, body=m.body, timestamp=m.timestamp,
            message_id=m.message_id,
        )
        for participant_id, is_read in m.read_by.items():
            message.set_is_read_by_participant(
                participants.get(participant_id) or Participant(participant_id),
                is_read,
            )
        messages.append(message)

    thread = Thread.restore(
        thread_id=snapshot.thread_id,
        subject=snapshot.subject,
        created_at=snapshot.created_at,
        participants=participants.values(),
        messages=messages,
        is_deleted_by_participant={
            p.participant_id: p.is_deleted
            for p in snapshot.participants if p.is_deleted is not None
        },
        dates_of_last_message_written_by_participant={
            p.participant_id: p.last_message_written_by_self
            for p in snapshot.participants
            if p.last_message_written_by_self is not None
        },
        dates_of_last_message_written_by_other_participant={
            p.participant_id: p.last_message_written_by_others
            for p in snapshot.participants
            if p.last_message_written_by_others is not None
        },
        keywords=snapshot.keywords,
    )
    thread.denormalize()
    return thread


def import_thread_from_file(path: Path) -> Thread:
    if not path.exists(): raise ThreadImportError(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f: state = json.load(f)
    except json.JSONDecodeError as e: raise ThreadImportError(f"Invalid JSON: {e}") from e
    if not isinstance(state, dict): raise ThreadImportError("Thread document must be a JSON object")
    return import_thread(state)
