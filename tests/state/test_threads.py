"""Tests for the thread repository."""
import pytest
import pytest_asyncio
from pathlib import Path
from uuid import uuid4

from src.state.database import DatabaseManager
from src.state.export import export_thread, import_thread
from src.state.repositories.threads import ThreadRepository
from src.thread import Message, Participant, Thread


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> DatabaseManager:
    """Create and initialize a temp database."""
    manager = DatabaseManager(tmp_path / "test_threads.db")
    await manager.initialize()
    return manager


class TestDatabaseManager:
    """Tests for schema initialization."""

    @pytest.mark.asyncio
    async def test_initialize_creates_tables(self, db: DatabaseManager) -> None:
        async with db.connection() as conn:
            cursor = await conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
            tables = {row[0] for row in await cursor.fetchall()}
        assert {"threads", "thread_participants", "thread_messages",
                "message_reads", "schema_versions"} <= tables
        assert db.is_initialized

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, db: DatabaseManager) -> None:
        await db.initialize()
        async with db.connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM schema_versions")
            row = await cursor.fetchone()
        assert row[0] == 1

    @pytest.mark.asyncio
    async def test_close(self, db: DatabaseManager) -> None:
        await db.close()
        assert db.is_initialized is False


class TestThreadRepository:
    """Tests for saving and loading aggregates."""

    @pytest.mark.asyncio
    async def test_save_and_get_by_id(self, db: DatabaseManager, hello_thread: Thread) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            loaded = await repo.get_by_id(hello_thread.thread_id)
        assert loaded is not None
        assert loaded.thread_id == hello_thread.thread_id
        assert loaded.subject == "Hello World"
        assert loaded.created_at == hello_thread.created_at
        assert loaded.keywords == "hello world hi there alice"
        assert loaded.get_participants() == hello_thread.get_participants()
        assert [p.name for p in loaded.get_participants()] == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_derived_maps_round_trip(self, db: DatabaseManager, hello_thread: Thread) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            loaded = await repo.get_by_id(hello_thread.thread_id)
        assert loaded.dates_of_last_message_written_by_participant == {"1": 100, "2": 200}
        assert loaded.dates_of_last_message_written_by_other_participant == {"1": 200, "2": 100}
        assert loaded.is_deleted_by_participant_map == {"1": False, "2": False}

    @pytest.mark.asyncio
    async def test_messages_keep_order_and_flags(self, db: DatabaseManager, hello_thread: Thread) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            loaded = await repo.get_by_id(hello_thread.thread_id)
        original = hello_thread.get_messages()
        restored = loaded.get_messages()
        assert [m.message_id for m in restored] == [m.message_id for m in original]
        assert [m.body for m in restored] == ["Hi there", "Hi Alice"]
        assert [m.timestamp for m in restored] == [100, 200]
        assert [m.read_flags for m in restored] == [m.read_flags for m in original]

    @pytest.mark.asyncio
    async def test_save_replaces_previous_state(self, db: DatabaseManager, hello_thread: Thread, carol) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            hello_thread.add_message(Message(sender=carol, body="Late reply", timestamp=300))
            hello_thread.set_is_deleted_by_participant(Participant("1"), True)
            await repo.save(hello_thread)
            loaded = await repo.get_by_id(hello_thread.thread_id)
        assert len(loaded.get_messages()) == 3
        assert loaded.is_participant(carol)
        assert loaded.is_deleted_by_participant(Participant("1")) is True
        assert loaded.keywords == "hello world hi there alice late reply"

    @pytest.mark.asyncio
    async def test_participant_without_flags(self, db: DatabaseManager, alice) -> None:
        thread = Thread(subject="Pending")
        thread.add_participant(alice)
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(thread)
            loaded = await repo.get_by_id(thread.thread_id)
        assert loaded.is_participant(alice)
        assert loaded.is_deleted_by_participant_map == {}
        assert loaded.dates_of_last_message_written_by_participant == {}

    @pytest.mark.asyncio
    async def test_get_by_id_returns_none(self, db: DatabaseManager) -> None:
        async with db.connection() as conn:
            result = await ThreadRepository(conn).get_by_id("nonexistent")
        assert result is None

    @pytest.mark.asyncio
    async def test_exists(self, db: DatabaseManager, hello_thread: Thread) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            assert await repo.exists(hello_thread.thread_id) is False
            await repo.save(hello_thread)
            assert await repo.exists(hello_thread.thread_id) is True

    @pytest.mark.asyncio
    async def test_delete_cascades(self, db: DatabaseManager, hello_thread: Thread) -> None:
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            deleted = await repo.delete(hello_thread.thread_id)
            cursor = await conn.execute("SELECT COUNT(*) FROM message_reads")
            reads = (await cursor.fetchone())[0]
            cursor = await conn.execute("SELECT COUNT(*) FROM thread_messages")
            messages = (await cursor.fetchone())[0]
        assert deleted is True
        assert reads == 0
        assert messages == 0

    @pytest.mark.asyncio
    async def test_delete_missing(self, db: DatabaseManager) -> None:
        async with db.connection() as conn:
            assert await ThreadRepository(conn).delete("nonexistent") is False

    @pytest.mark.asyncio
    async def test_copies_share_message_ids(self, db: DatabaseManager, hello_thread: Thread, bob) -> None:
        state = export_thread(hello_thread)
        state["thread_id"] = str(uuid4())
        copy = import_thread(state)
        copy.set_is_read_by_participant(bob, True)
        async with db.connection() as conn:
            repo = ThreadRepository(conn)
            await repo.save(hello_thread)
            await repo.save(copy)
            original = await repo.get_by_id(hello_thread.thread_id)
            loaded_copy = await repo.get_by_id(copy.thread_id)
            await repo.delete(copy.thread_id)
            after_delete = await repo.get_by_id(hello_thread.thread_id)
        assert ([m.message_id for m in loaded_copy.get_messages()]
                == [m.message_id for m in original.get_messages()])
        assert loaded_copy.is_read_by_participant(bob) is True
        assert original.is_read_by_participant(bob) is False
        assert [m.read_flags for m in after_delete.get_messages()] == [
            {"1": True, "2": False}, {"1": False, "2": True},
        ]
