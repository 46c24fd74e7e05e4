"""Input validation utilities for CLI commands."""

import re
from uuid import UUID


def validate_participant_id(participant_id: str) -> str:
    """Validate and return participant ID. Raises ValueError if invalid."""
    if not participant_id or not participant_id.strip():
        raise ValueError("Participant ID cannot be empty")
    participant_id = participant_id.strip()
    if len(participant_id) > 256:
        raise ValueError("Participant ID cannot exceed 256 characters")
    if not re.match(r"^[a-zA-Z0-9_.@-]+$", participant_id):
        raise ValueError(
            "Participant ID can only contain letters, numbers, underscores, "
            "dots, at signs, and hyphens"
        )
    return participant_id


def validate_thread_id(thread_id: str) -> str:
    """Validate and return thread ID in canonical UUID form."""
    if not thread_id or not thread_id.strip():
        raise ValueError("Thread ID cannot be empty")
    try:
        return str(UUID(thread_id.strip()))
    except ValueError as e:
        raise ValueError(f"Thread ID must be a valid UUID: {e}") from e


def validate_subject(subject: str) -> str:
    """Validate and return thread subject. Raises ValueError if invalid."""
    if not subject or not subject.strip():
        raise ValueError("Subject cannot be empty")
    subject = subject.strip()
    if len(subject) > 256:
        raise ValueError("Subject cannot exceed 256 characters")
    return subject


def validate_message_body(body: str) -> str:
    """Validate and return message body. Raises ValueError if invalid."""
    if not body:
        raise ValueError("Message body cannot be empty")
    if len(body) > 65536:
        raise ValueError("Message body cannot exceed 65536 characters")
    return body


def validate_timestamp(timestamp: int) -> int:
    """Validate and return a message timestamp (seconds since the epoch)."""
    if timestamp < 0:
        raise ValueError("Timestamp cannot be negative")
    return timestamp
