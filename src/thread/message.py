"""Thread message model."""
from dataclasses import dataclass, field
from typing import Iterable
from uuid import uuid4

from src.thread.contracts import ParticipantProtocol


@dataclass(eq=False)
class Message:
    """A message posted to a thread.

    Attributes:
        sender: The participant that wrote the message.
        body: The message text.
        timestamp: Creation time, seconds since the epoch.
        message_id: Unique identifier for the message.

    Read flags are keyed by participant id and are the only mutable part
    of a message.
    """

    sender: ParticipantProtocol
    body: str
    timestamp: int
    message_id: str = field(default_factory=lambda: str(uuid4()))
    _is_read_by_participant: dict[str, bool] = field(
        default_factory=dict, repr=False,
    )

    def __post_init__(self) -> None:
        """Validate required fields."""
        if self.sender is None:
            raise ValueError("sender cannot be empty")
        if not self.message_id:
            raise ValueError("message_id cannot be empty")
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise ValueError(f"timestamp must be an integer, got {self.timestamp!r}")
        if self.timestamp < 0:
            raise ValueError("timestamp cannot be negative")

    @property
    def read_flags(self) -> dict[str, bool]:
        """Snapshot of the read flags, keyed by participant id."""
        return dict(self._is_read_by_participant)

    def is_read_by_participant(self, participant: ParticipantProtocol) -> bool:
        """Tell whether the participant has read this message.

        A participant without a recorded flag has not read it.
        """
        return self._is_read_by_participant.get(participant.participant_id, False)

    def has_read_flag(self, participant: ParticipantProtocol) -> bool:
        return participant.participant_id in self._is_read_by_participant

    def set_is_read_by_participant(
        self, participant: ParticipantProtocol, is_read: bool,
    ) -> None:
        self._is_read_by_participant[participant.participant_id] = bool(is_read)

    def ensure_is_read_by_participant(
        self, participants: Iterable[ParticipantProtocol],
    ) -> None:
        """Record unread for participants that have no flag yet."""
        for participant in participants:
            self._is_read_by_participant.setdefault(participant.participant_id, False)
