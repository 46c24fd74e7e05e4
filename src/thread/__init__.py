"""Conversation thread aggregate."""
from src.thread.contracts import MessageProtocol, ParticipantProtocol
from src.thread.exceptions import MalformedMessageError, NotAParticipantError, ThreadError
from src.thread.keywords import extract_keywords, tokenize
from src.thread.message import Message
from src.thread.participant import Participant
from src.thread.thread import Thread
__all__ = [
    "MessageProtocol", "ParticipantProtocol",
    "MalformedMessageError", "NotAParticipantError", "ThreadError",
    "extract_keywords", "tokenize",
    "Message", "Participant", "Thread",
]
