"""Pytest fixtures shared by the thread, state and CLI tests."""
import pytest
from pathlib import Path

from src.cli.utils.config import ConfigManager
from src.thread import Message, Participant, Thread


@pytest.fixture
def alice() -> Participant:
    return Participant("1", "Alice")


@pytest.fixture
def bob() -> Participant:
    return Participant("2", "Bob")


@pytest.fixture
def carol() -> Participant:
    return Participant("3", "Carol")


@pytest.fixture
def hello_thread(alice: Participant, bob: Participant) -> Thread:
    """The two-message 'Hello World' conversation between Alice and Bob."""
    thread = Thread(subject="Hello World")
    thread.add_message(Message(sender=alice, body="Hi there", timestamp=100))
    thread.add_message(Message(sender=bob, body="Hi Alice", timestamp=200))
    return thread


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Point the CLI config at a temp directory."""
    directory = tmp_path / "threads"
    monkeypatch.delenv("THREADS_CONFIG_DIR", raising=False)
    monkeypatch.setattr(ConfigManager, "DEFAULT_DIR", directory)
    return directory
