"""Thread aggregate and its denormalization pipeline.

A thread owns an append-only message log and keeps a handful of derived
views over it: the participant set, per-participant read flags (stored on
the messages), last-activity dates split into "written by me" and "written
by others", soft deletion flags and a search keyword string.

Every ``add_message`` call appends and then runs ``denormalize`` to
completion, so callers never observe stale derived state.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional
from uuid import uuid4

from src.thread.contracts import MessageProtocol, ParticipantProtocol
from src.thread.exceptions import MalformedMessageError
from src.thread.keywords import extract_keywords

logger = logging.getLogger(__name__)


class Thread:
    """A conversation: messages, participants and derived indices."""

    def __init__(
        self,
        subject: str = "",
        thread_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self._thread_id = thread_id or str(uuid4())
        self._subject = subject
        self._created_at = created_at or datetime.now(timezone.utc)
        self._messages: list[MessageProtocol] = []
        self._participants: dict[str, ParticipantProtocol] = {}
        self._is_deleted_by_participant: dict[str, bool] = {}
        self._dates_of_last_message_written_by_participant: dict[str, int] = {}
        self._dates_of_last_message_written_by_other_participant: dict[str, int] = {}
        self._keywords = ""

    @classmethod
    def restore(
        cls,
        thread_id: str,
        subject: str,
        created_at: datetime,
        participants: Iterable[ParticipantProtocol],
        messages: Iterable[MessageProtocol],
        is_deleted_by_participant: Mapping[str, bool],
        dates_of_last_message_written_by_participant: Mapping[str, int],
        dates_of_last_message_written_by_other_participant: Mapping[str, int],
        keywords: str,
    ) -> "Thread":
        """Rebuild a thread from persisted state.

        The pipeline is not run: the stored derived state is taken as is.
        """
        thread = cls(subject=subject, thread_id=thread_id, created_at=created_at)
        for participant in participants:
            thread.add_participant(participant)
        thread._messages = list(messages)
        thread._is_deleted_by_participant = {
            k: bool(v) for k, v in is_deleted_by_participant.items()
        }
        thread._dates_of_last_message_written_by_participant = dict(
            dates_of_last_message_written_by_participant
        )
        thread._dates_of_last_message_written_by_other_participant = dict(
            dates_of_last_message_written_by_other_participant
        )
        thread._keywords = keywords
        return thread

    @property
    def thread_id(self) -> str:
        return self._thread_id

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def keywords(self) -> str:
        """Distinct lowercase words of the subject and bodies, for search."""
        return self._keywords

    @property
    def is_deleted_by_participant_map(self) -> dict[str, bool]:
        return dict(self._is_deleted_by_participant)

    @property
    def dates_of_last_message_written_by_participant(self) -> dict[str, int]:
        """Latest timestamp each participant wrote, keyed by id (sentbox order)."""
        return dict(self._dates_of_last_message_written_by_participant)

    @property
    def dates_of_last_message_written_by_other_participant(self) -> dict[str, int]:
        """Latest timestamp written by someone else, keyed by id (inbox order)."""
        return dict(self._dates_of_last_message_written_by_other_participant)

    def get_messages(self) -> list[MessageProtocol]:
        return list(self._messages)

    def get_first_message(self) -> Optional[MessageProtocol]:
        return self._messages[0] if self._messages else None

    def get_last_message(self) -> Optional[MessageProtocol]:
        return self._messages[-1] if self._messages else None

    def add_message(self, message: MessageProtocol) -> None:
        """Append a message and refresh every derived view."""
        _check_message(message)
        self._messages.append(message)
        self.denormalize()

    def get_participants(self) -> list[ParticipantProtocol]:
        return list(self._participants.values())

    def get_other_participants(
        self, participant: ParticipantProtocol,
    ) -> list[ParticipantProtocol]:
        """Participants other than the given one."""
        return [
            p for pid, p in self._participants.items()
            if pid != participant.participant_id
        ]

    def add_participant(self, participant: ParticipantProtocol) -> None:
        """Add a participant; nothing happens if the id is already present."""
        if not self.is_participant(participant):
            self._participants[participant.participant_id] = participant
            logger.debug(
                "Added participant=%s to thread=%s",
                participant.participant_id, self._thread_id,
            )

    def update_participant(self, participant: ParticipantProtocol) -> bool:
        """Replace the stored participant with the same id, keeping its position.

        Returns False if the id is not part of the thread.
        """
        if not self.is_participant(participant):
            return False
        self._participants[participant.participant_id] = participant
        return True

    def is_participant(self, participant: ParticipantProtocol) -> bool:
        return participant.participant_id in self._participants

    def is_deleted_by_participant(self, participant: ParticipantProtocol) -> bool:
        """Tell whether the participant deleted this thread.

        Participants without a flag (e.g. never added) are reported as not
        having deleted it.
        """
        return self._is_deleted_by_participant.get(participant.participant_id, False)

    def set_is_deleted_by_participant(
        self, participant: ParticipantProtocol, is_deleted: bool,
    ) -> None:
        self._is_deleted_by_participant[participant.participant_id] = bool(is_deleted)

    def set_is_deleted(self, is_deleted: bool) -> None:
        """Set the deletion flag for every current participant."""
        for participant in self._participants.values():
            self.set_is_deleted_by_participant(participant, is_deleted)

    def is_read_by_participant(self, participant: ParticipantProtocol) -> bool:
        """True when the participant has read every message of the thread."""
        return all(
            m.is_read_by_participant(participant) for m in self._messages
        )

    def set_is_read_by_participant(
        self, participant: ParticipantProtocol, is_read: bool,
    ) -> None:
        """Mark every message as read (or unread) by the participant."""
        for message in self._messages:
            message.set_is_read_by_participant(participant, is_read)

    def get_last_message_date(
        self, participant: ParticipantProtocol, written_by_self: bool,
    ) -> int:
        """Latest message timestamp relevant to a participant, 0 if none.

        Args:
            participant: The participant whose view is requested.
            written_by_self: Sentbox date when true, inbox date otherwise.
        """
        dates = (
            self._dates_of_last_message_written_by_participant
            if written_by_self
            else self._dates_of_last_message_written_by_other_participant
        )
        return dates.get(participant.participant_id, 0)

    # Denormalization

    def denormalize(self) -> None:
        """Recompute all derived state from the message log.

        Passes run in a fixed order and each one is idempotent, so running
        this twice in a row leaves the thread unchanged.
        """
        for message in self._messages:
            _check_message(message)
        self._do_participants()
        self._do_keywords()
        self._do_ensure_messages_is_read()
        self._do_dates_of_last_message_written()
        self._do_ensure_is_deleted_by_participant()
        logger.debug(
            "Denormalized thread=%s messages=%d participants=%d",
            self._thread_id, len(self._messages), len(self._participants),
        )

    def _do_participants(self) -> None:
        for message in self._messages:
            self.add_participant(message.sender)

    def _do_keywords(self) -> None:
        self._keywords = extract_keywords(
            self._subject, (m.body for m in self._messages),
        )

    def _do_ensure_messages_is_read(self) -> None:
        participants = self.get_participants()
        for message in self._messages:
            message.set_is_read_by_participant(message.sender, True)
            message.ensure_is_read_by_participant(participants)

    def _do_dates_of_last_message_written(self) -> None:
        """Refresh both last-activity maps in one pass over the log.

        The latest timestamp per sender is collected first. A participant's
        own date is its entry there; its "others" date is the largest entry
        of any other sender, which is always one of the two largest.
        Previously stored values act as a floor.
        """
        latest_by_sender: dict[str, int] = {}
        for message in self._messages:
            sender_id = message.sender.participant_id
            latest_by_sender[sender_id] = max(
                latest_by_sender.get(sender_id, 0), message.timestamp,
            )
        top_two = sorted(
            latest_by_sender.items(), key=lambda item: item[1], reverse=True,
        )[:2]

        own = self._dates_of_last_message_written_by_participant
        other = self._dates_of_last_message_written_by_other_participant
        for participant_id in self._participants:
            own[participant_id] = max(
                own.get(participant_id, 0),
                latest_by_sender.get(participant_id, 0),
            )
            latest_by_others = next(
                (ts for sender_id, ts in top_two if sender_id != participant_id), 0,
            )
            other[participant_id] = max(
                other.get(participant_id, 0), latest_by_others,
            )

    def _do_ensure_is_deleted_by_participant(self) -> None:
        for participant_id in self._participants:
            self._is_deleted_by_participant.setdefault(participant_id, False)

    def __repr__(self) -> str:
        return (
            f"Thread(thread_id={self._thread_id!r}, subject={self._subject!r}, "
            f"messages={len(self._messages)}, participants={len(self._participants)})"
        )


def _check_message(message: MessageProtocol) -> None:
    """Fail fast on messages that break the collaborator contract."""
    message_id = getattr(message, "message_id", None)
    sender = getattr(message, "sender", None)
    if sender is None or not getattr(sender, "participant_id", None):
        raise MalformedMessageError("message has no sender", message_id=message_id)
    timestamp = getattr(message, "timestamp", None)
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise MalformedMessageError(
            f"message timestamp must be an integer, got {timestamp!r}",
            message_id=message_id,
        )
