"""Exception types for the thread aggregate."""


class ThreadError(Exception):
    """Base exception for all thread errors."""
    pass


class MalformedMessageError(ThreadError):
    """A message handed to the pipeline breaks the collaborator contract."""
    def __init__(self, message: str, message_id: str | None = None) -> None:
        super().__init__(message)
        self.message_id = message_id


class NotAParticipantError(ThreadError):
    """A per-participant change was requested by someone outside the thread."""
    def __init__(self, thread_id: str, participant_id: str) -> None:
        super().__init__(
            f"Participant {participant_id} is not part of thread {thread_id}"
        )
        self.thread_id = thread_id
        self.participant_id = participant_id
