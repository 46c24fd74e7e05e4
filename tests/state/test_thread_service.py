"""Tests for the thread persistence service."""
import pytest
import pytest_asyncio
from pathlib import Path

from src.state.database import DatabaseManager
from src.state.thread_service import (
    ThreadNotFoundError,
    create_thread,
    load_thread,
    mark_thread_deleted,
    mark_thread_read,
    post_message,
)
from src.thread import NotAParticipantError, Participant


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> DatabaseManager:
    """Create and initialize a temp database."""
    manager = DatabaseManager(tmp_path / "test_service.db")
    await manager.initialize()
    return manager


class TestCreateThread:
    """Tests for create_thread."""

    @pytest.mark.asyncio
    async def test_creates_with_invited_participants(self, db, alice, bob) -> None:
        thread = await create_thread(db, "Lunch", alice, [bob])
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.get_participants() == [alice, bob]
        assert loaded.get_messages() == []
        assert loaded.keywords == "lunch"
        assert loaded.is_deleted_by_participant_map == {"1": False, "2": False}
        assert loaded.dates_of_last_message_written_by_participant == {"1": 0, "2": 0}

    @pytest.mark.asyncio
    async def test_creates_with_first_message(self, db, alice, bob) -> None:
        thread = await create_thread(db, "Lunch", alice, [bob], body="Noon?", timestamp=50)
        loaded = await load_thread(db, thread.thread_id)
        (message,) = loaded.get_messages()
        assert message.sender == alice
        assert message.timestamp == 50
        assert message.is_read_by_participant(alice) is True
        assert message.is_read_by_participant(bob) is False
        assert loaded.dates_of_last_message_written_by_other_participant == {"1": 0, "2": 50}


class TestPostMessage:
    """Tests for post_message."""

    @pytest.mark.asyncio
    async def test_post_denormalizes_and_persists(self, db, alice, bob) -> None:
        thread = await create_thread(db, "Hello World", alice, body="Hi there", timestamp=100)
        await post_message(db, thread.thread_id, bob, "Hi Alice", 200)
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.keywords == "hello world hi there alice"
        assert loaded.dates_of_last_message_written_by_participant == {"1": 100, "2": 200}
        assert loaded.dates_of_last_message_written_by_other_participant == {"1": 200, "2": 100}
        assert loaded.is_participant(bob)

    @pytest.mark.asyncio
    async def test_post_fills_in_invited_name(self, db, alice) -> None:
        thread = await create_thread(db, "Lunch", alice, [Participant("2")])
        await post_message(db, thread.thread_id, Participant("2", "Bob"), "Sure", 10)
        loaded = await load_thread(db, thread.thread_id)
        assert [p.name for p in loaded.get_participants()] == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_nameless_post_keeps_stored_name(self, db, alice) -> None:
        thread = await create_thread(db, "Lunch", alice)
        await post_message(db, thread.thread_id, Participant("1"), "Anyone?", 10)
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.get_participants()[0].name == "Alice"

    @pytest.mark.asyncio
    async def test_post_to_missing_thread(self, db, alice) -> None:
        with pytest.raises(ThreadNotFoundError) as exc_info:
            await post_message(db, "missing", alice, "Hi", 1)
        assert exc_info.value.thread_id == "missing"


class TestMarkThread:
    """Tests for read and delete markers."""

    @pytest.mark.asyncio
    async def test_mark_read_and_unread(self, db, alice, bob) -> None:
        thread = await create_thread(db, "Topic", alice, [bob], body="Hello", timestamp=1)
        await mark_thread_read(db, thread.thread_id, bob)
        assert (await load_thread(db, thread.thread_id)).is_read_by_participant(bob)
        await mark_thread_read(db, thread.thread_id, bob, is_read=False)
        assert not (await load_thread(db, thread.thread_id)).is_read_by_participant(bob)

    @pytest.mark.asyncio
    async def test_mark_deleted_for_one_participant(self, db, alice, bob) -> None:
        thread = await create_thread(db, "Topic", alice, [bob])
        await mark_thread_deleted(db, thread.thread_id, alice)
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.is_deleted_by_participant(alice) is True
        assert loaded.is_deleted_by_participant(bob) is False

    @pytest.mark.asyncio
    async def test_restore_deleted(self, db, alice) -> None:
        thread = await create_thread(db, "Topic", alice)
        await mark_thread_deleted(db, thread.thread_id, alice)
        await mark_thread_deleted(db, thread.thread_id, alice, is_deleted=False)
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.is_deleted_by_participant(alice) is False

    @pytest.mark.asyncio
    async def test_mark_missing_thread(self, db) -> None:
        with pytest.raises(ThreadNotFoundError):
            await mark_thread_read(db, "missing", Participant("1"))

    @pytest.mark.asyncio
    async def test_outsider_cannot_delete(self, db, alice, carol) -> None:
        thread = await create_thread(db, "Topic", alice, body="Hello", timestamp=1)
        with pytest.raises(NotAParticipantError) as exc_info:
            await mark_thread_deleted(db, thread.thread_id, carol)
        assert exc_info.value.participant_id == "3"
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.is_participant(carol) is False
        assert loaded.is_deleted_by_participant_map == {"1": False}

    @pytest.mark.asyncio
    async def test_outsider_cannot_mark_read(self, db, alice, carol) -> None:
        thread = await create_thread(db, "Topic", alice, body="Hello", timestamp=1)
        with pytest.raises(NotAParticipantError):
            await mark_thread_read(db, thread.thread_id, carol)
        loaded = await load_thread(db, thread.thread_id)
        assert loaded.get_messages()[0].read_flags == {"1": True}
