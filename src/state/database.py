"""Database connection and lifecycle management."""
import aiosqlite
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator


class DatabaseError(Exception):
    pass


class DatabaseManager:
    """Manages SQLite database connections and schema initialization."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Create tables and indexes."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self.connection() as conn:
            await conn.executescript(_SCHEMA)
            await conn.commit()
        self._initialized = True

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an async database connection."""
        conn = await aiosqlite.connect(self._db_path)
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        finally:
            await conn.close()

    async def close(self) -> None:
        """Mark the manager as closed."""
        self._initialized = False


_SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_versions (version TEXT PRIMARY KEY, applied_at TEXT NOT NULL);
CREATE TABLE IF NOT EXISTS threads (
    thread_id   TEXT PRIMARY KEY,
    subject     TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    keywords    TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS thread_participants (
    thread_id                       TEXT NOT NULL,
    participant_id                  TEXT NOT NULL,
    name                            TEXT,
    position                        INTEGER NOT NULL,
    is_deleted                      INTEGER,
    last_message_written_by_self    INTEGER,
    last_message_written_by_others  INTEGER,
    PRIMARY KEY (thread_id, participant_id),
    FOREIGN KEY (thread_id) REFERENCES threads(thread_id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS thread_messages (
    thread_id   TEXT NOT NULL,
    message_id  TEXT NOT NULL,
    position    INTEGER NOT NULL,
    sender_id   TEXT NOT NULL,
    sender_name TEXT,
    body        TEXT NOT NULL,
    timestamp   INTEGER NOT NULL,
    PRIMARY KEY (thread_id, message_id),
    FOREIGN KEY (thread_id) REFERENCES threads(thread_id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_messages_thread ON thread_messages(thread_id, position);
CREATE TABLE IF NOT EXISTS message_reads (
    thread_id       TEXT NOT NULL,
    message_id      TEXT NOT NULL,
    participant_id  TEXT NOT NULL,
    is_read         INTEGER NOT NULL,
    PRIMARY KEY (thread_id, message_id, participant_id),
    FOREIGN KEY (thread_id, message_id)
        REFERENCES thread_messages(thread_id, message_id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_participants_inbox ON thread_participants(participant_id, last_message_written_by_others);
CREATE INDEX IF NOT EXISTS idx_participants_sentbox ON thread_participants(participant_id, last_message_written_by_self);
INSERT OR IGNORE INTO schema_versions (version, applied_at) VALUES ('1.0.0', datetime('now'));
"""
