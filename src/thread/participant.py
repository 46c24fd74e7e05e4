"""Participant model."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """An identity taking part in one or more threads.

    Equality and hashing use ``participant_id`` only, so the same logical
    participant loaded twice compares equal.
    """

    participant_id: str
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.participant_id:
            raise ValueError("participant_id cannot be empty")

    def __str__(self) -> str:
        return self.name or self.participant_id
