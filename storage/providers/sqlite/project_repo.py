"""SQLite repository for the project registry."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from storage.models import ProjectRow

_PROJECT_COLUMNS = "id, name, path, created_at"


def _to_project(row: tuple) -> ProjectRow:
    return ProjectRow(id=row[0], name=row[1], path=row[2], created_at=row[3])


class SQLiteProjectRepo:
    """Project registry with parameterized SQL operations."""

    def __init__(self, db_path: str | Path, conn: sqlite3.Connection | None = None) -> None:
        self._own_conn = conn is None
        if conn is not None:
            self._conn = conn
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._ensure_table()

    def close(self) -> None:
        if self._own_conn:
            self._conn.close()

    def create_project(self, name: str, path: str) -> ProjectRow:
        cursor = self._conn.execute(
            "INSERT INTO projects (name, path) VALUES (?, ?)",
            (name, path),
        )
        self._conn.commit()
        row = self._conn.execute(
            f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE id = ?",
            (int(cursor.lastrowid),),
        ).fetchone()
        return _to_project(row)

    def get_project(self, project_id: int) -> ProjectRow | None:
        row = self._conn.execute(
            f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE id = ?",
            (project_id,),
        ).fetchone()
        if not row:
            return None
        return _to_project(row)

    def list_projects(self) -> list[ProjectRow]:
        rows = self._conn.execute(
            f"SELECT {_PROJECT_COLUMNS} FROM projects ORDER BY id ASC"
        ).fetchall()
        return [_to_project(r) for r in rows]

    def _ensure_table(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS projects (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                path TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        self._conn.commit()
