"""SQLite repository for chats and their ordered messages."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from storage.models import ChatRow, MessageRow

_CHAT_COLUMNS = "id, project_id, title, created_at"
_MESSAGE_COLUMNS = "id, chat_id, role, content, commit_hash, created_at"


def _to_chat(row: tuple) -> ChatRow:
    return ChatRow(id=row[0], project_id=row[1], title=row[2], created_at=row[3])


def _to_message(row: tuple) -> MessageRow:
    return MessageRow(
        id=row[0],
        chat_id=row[1],
        role=row[2],
        content=row[3],
        commit_hash=row[4],
        created_at=row[5],
    )


class SQLiteTimelineRepo:
    """Timeline repository: chats are streams, messages are entries."""

    def __init__(self, db_path: str | Path, conn: sqlite3.Connection | None = None) -> None:
        self._own_conn = conn is None
        if conn is not None:
            self._conn = conn
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._ensure_tables()

    def close(self) -> None:
        if self._own_conn:
            self._conn.close()

    def create_chat(self, project_id: int, title: str | None = None) -> ChatRow:
        cursor = self._conn.execute(
            "INSERT INTO chats (project_id, title) VALUES (?, ?)",
            (project_id, title),
        )
        self._conn.commit()
        row = self._conn.execute(
            f"SELECT {_CHAT_COLUMNS} FROM chats WHERE id = ?",
            (int(cursor.lastrowid),),
        ).fetchone()
        return _to_chat(row)

    def get_chat(self, chat_id: int) -> ChatRow | None:
        row = self._conn.execute(
            f"SELECT {_CHAT_COLUMNS} FROM chats WHERE id = ?",
            (chat_id,),
        ).fetchone()
        if not row:
            return None
        return _to_chat(row)

    def append_message(
        self,
        chat_id: int,
        role: str,
        content: str,
        commit_hash: str | None = None,
    ) -> MessageRow:
        cursor = self._conn.execute(
            "INSERT INTO messages (chat_id, role, content, commit_hash) VALUES (?, ?, ?, ?)",
            (chat_id, role, content, commit_hash),
        )
        self._conn.commit()
        row = self._conn.execute(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE id = ?",
            (int(cursor.lastrowid),),
        ).fetchone()
        return _to_message(row)

    def list_messages(self, chat_id: int) -> list[MessageRow]:
        rows = self._conn.execute(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE chat_id = ? ORDER BY id ASC",
            (chat_id,),
        ).fetchall()
        return [_to_message(row) for row in rows]

    def find_by_commit_hash(self, commit_hash: str) -> MessageRow | None:
        row = self._conn.execute(
            f"SELECT {_MESSAGE_COLUMNS} FROM messages WHERE commit_hash = ? ORDER BY id ASC LIMIT 1",
            (commit_hash,),
        ).fetchone()
        return _to_message(row) if row else None

    def list_after(self, chat_id: int, message_id: int) -> list[MessageRow]:
        rows = self._conn.execute(
            f"""
            SELECT {_MESSAGE_COLUMNS}
            FROM messages
            WHERE chat_id = ? AND id > ?
            ORDER BY id DESC
            """,
            (chat_id, message_id),
        ).fetchall()
        return [_to_message(row) for row in rows]

    def delete_entries(self, chat_id: int, message_ids: list[int]) -> int:
        if not message_ids:
            return 0

        placeholders = ",".join("?" for _ in message_ids)
        # @@@param_sql - ids come from a prior query but keep the IN-clause fully parameterized.
        with self._conn:
            cursor = self._conn.execute(
                f"DELETE FROM messages WHERE chat_id = ? AND id IN ({placeholders})",
                [chat_id, *message_ids],
            )
        return int(cursor.rowcount)

    def _ensure_tables(self) -> None:
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS chats (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                project_id INTEGER NOT NULL,
                title TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE TABLE IF NOT EXISTS messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                chat_id INTEGER NOT NULL,
                role TEXT NOT NULL,
                content TEXT NOT NULL,
                commit_hash TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            CREATE INDEX IF NOT EXISTS idx_messages_chat_id
            ON messages (chat_id, id);
            CREATE INDEX IF NOT EXISTS idx_messages_commit_hash
            ON messages (commit_hash);
            """
        )
        self._conn.commit()
