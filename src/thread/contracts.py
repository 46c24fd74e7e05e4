"""
Collaborator contracts consumed by the thread aggregate.

The Thread never depends on the concrete Participant and Message classes;
it works against these protocols, so storage layers can hand in their own
entities as long as they expose the same surface.

Usage:
    class StoredUser:
        participant_id: str

    thread.add_participant(StoredUser(...))
"""
from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class ParticipantProtocol(Protocol):
    """An identity with a stable, comparable identifier."""

    @property
    def participant_id(self) -> str:
        """Identifier used as the key of every per-participant map."""
        ...


@runtime_checkable
class MessageProtocol(Protocol):
    """A message record with a per-participant read flag set.

    Implementations must provide:
    - the sender, body and creation timestamp
    - an unconditional read flag setter
    - a setter that only fills in missing flags
    - a read flag query
    """

    @property
    def sender(self) -> ParticipantProtocol:
        ...

    @property
    def body(self) -> str:
        ...

    @property
    def timestamp(self) -> int:
        """Creation time as an integer (seconds since the epoch)."""
        ...

    def set_is_read_by_participant(
        self, participant: ParticipantProtocol, is_read: bool,
    ) -> None:
        ...

    def ensure_is_read_by_participant(
        self, participants: Iterable[ParticipantProtocol],
    ) -> None:
        """Record unread for every participant lacking a flag.

        Existing flags, true or false, are left untouched.
        """
        ...

    def is_read_by_participant(self, participant: ParticipantProtocol) -> bool:
        """False for a participant without a recorded flag."""
        ...
