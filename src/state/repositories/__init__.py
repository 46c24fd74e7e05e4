"""Repositories."""
from src.state.repositories.threads import ThreadRepository
__all__ = [
    "ThreadRepository",
]
