"""Thread repository for aggregate storage."""
import aiosqlite
from datetime import datetime
from typing import Optional

from src.thread import Message, Participant, Thread


class ThreadRepository:
    """Stores whole thread aggregates, derived state included."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save(self, thread: Thread) -> None:
        """Insert or replace a thread and everything it owns.

        Child rows are rewritten from scratch and committed together with
        the thread row.
        """
        await self._conn.execute(
            "INSERT INTO threads (thread_id, subject, created_at, keywords) "
            "VALUES (?, ?, ?, ?) ON CONFLICT(thread_id) DO UPDATE SET "
            "subject = excluded.subject, keywords = excluded.keywords",
            (thread.thread_id, thread.subject,
             thread.created_at.isoformat(), thread.keywords),
        )
        await self._conn.execute(
            "DELETE FROM thread_participants WHERE thread_id = ?",
            (thread.thread_id,),
        )
        await self._conn.execute(
            "DELETE FROM thread_messages WHERE thread_id = ?",
            (thread.thread_id,),
        )
        deleted = thread.is_deleted_by_participant_map
        own = thread.dates_of_last_message_written_by_participant
        other = thread.dates_of_last_message_written_by_other_participant
        await self._conn.executemany(
            "INSERT INTO thread_participants (thread_id, participant_id, name, "
            "position, is_deleted, last_message_written_by_self, "
            "last_message_written_by_others) VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    thread.thread_id, p.participant_id, getattr(p, "name", None),
                    position,
                    int(deleted[p.participant_id]) if p.participant_id in deleted else None,
                    own.get(p.participant_id), other.get(p.participant_id),
                )
                for position, p in enumerate(thread.get_participants())
            ],
        )
        messages = thread.get_messages()
        await self._conn.executemany(
            "INSERT INTO thread_messages (message_id, thread_id, position, "
            "sender_id, sender_name, body, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (
                    m.message_id, thread.thread_id, position,
                    m.sender.participant_id, getattr(m.sender, "name", None),
                    m.body, m.timestamp,
                )
                for position, m in enumerate(messages)
            ],
        )
        await self._conn.executemany(
            "INSERT INTO message_reads (thread_id, message_id, participant_id, "
            "is_read) VALUES (?, ?, ?, ?)",
            [
                (thread.thread_id, m.message_id, participant_id, int(is_read))
                for m in messages
                for participant_id, is_read in m.read_flags.items()
            ],
        )
        await self._conn.commit()

    async def get_by_id(self, thread_id: str) -> Optional[Thread]:
        """Load a thread by its ID, or None if it does not exist."""
        cursor = await self._conn.execute(
            "SELECT * FROM threads WHERE thread_id = ?", (thread_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None

        cursor = await self._conn.execute(
            "SELECT * FROM thread_participants WHERE thread_id = ? "
            "ORDER BY position", (thread_id,),
        )
        participant_rows = await cursor.fetchall()

        cursor = await self._conn.execute(
            "SELECT * FROM thread_messages WHERE thread_id = ? "
            "ORDER BY position", (thread_id,),
        )
        message_rows = await cursor.fetchall()

        cursor = await self._conn.execute(
            "SELECT message_id, participant_id, is_read "
            "FROM message_reads WHERE thread_id = ?",
            (thread_id,),
        )
        reads: dict[str, list[tuple[str, bool]]] = {}
        for r in await cursor.fetchall():
            reads.setdefault(r["message_id"], []).append(
                (r["participant_id"], bool(r["is_read"]))
            )

        participants = {
            r["participant_id"]: Participant(r["participant_id"], r["name"])
            for r in participant_rows
        }
        messages = [
            self._row_to_message(r, participants, reads.get(r["message_id"], []))
            for r in message_rows
        ]
        return Thread.restore(
            thread_id=row["thread_id"],
            subject=row["subject"],
            created_at=datetime.fromisoformat(row["created_at"]),
            participants=participants.values(),
            messages=messages,
            is_deleted_by_participant={
                r["participant_id"]: bool(r["is_deleted"])
                for r in participant_rows if r["is_deleted"] is not None
            },
            dates_of_last_message_written_by_participant={
                r["participant_id"]: r["last_message_written_by_self"]
                for r in participant_rows
                if r["last_message_written_by_self"] is not None
            },
            dates_of_last_message_written_by_other_participant={
                r["participant_id"]: r["last_message_written_by_others"]
                for r in participant_rows
                if r["last_message_written_by_others"] is not None
            },
            keywords=row["keywords"],
        )

    async def exists(self, thread_id: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM threads WHERE thread_id = ?", (thread_id,),
        )
        return await cursor.fetchone() is not None

    async def delete(self, thread_id: str) -> bool:
        """Permanently remove a thread with its messages and flags."""
        cursor = await self._conn.execute(
            "DELETE FROM threads WHERE thread_id = ?", (thread_id,),
        )
        await self._conn.commit()
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_message(
        row: aiosqlite.Row,
        participants: dict[str, Participant],
        reads: list[tuple[str, bool]],
    ) -> Message:
        """Convert a database row and its read flags to a Message."""
        sender = participants.get(row["sender_id"]) or Participant(
            row["sender_id"], row["sender_name"],
        )
        message = Message(
            sender=sender, body=row["body"], timestamp=row["timestamp"],
            message_id=row["message_id"],
        )
        for participant_id, is_read in reads:
            message.set_is_read_by_participant(
                participants.get(participant_id) or Participant(participant_id),
                is_read,
            )
        return message
