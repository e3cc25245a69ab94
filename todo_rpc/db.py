from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generator, List, Optional

from .models import TodoEntity
from .repositories import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    description: str = "description"
    completed: str = "completed"
    created_at: str = "created_at"


_COLS = _Cols()

# UTC with millisecond precision, e.g. 2025-01-25T10:15:30.123
_STORE_NOW = "(strftime('%Y-%m-%dT%H:%M:%f', 'now'))"


class SQLiteRepository(Repository):
    """
    SQLite-backed repository. The store assigns id and created_at.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.description} TEXT NOT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL DEFAULT {_STORE_NOW}
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )
        logger.debug("SQLite store ready at %s", self._db_path)

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        created_at = datetime.fromisoformat(row[_COLS.created_at])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return {
            "id": int(row[_COLS.id]),
            "description": str(row[_COLS.description]),
            "completed": bool(row[_COLS.completed]),
            "created_at": created_at,
        }

    def _select_one(self, conn: sqlite3.Connection, todo_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()

    def create(self, description: str) -> TodoEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"INSERT INTO {_COLS.table} ({_COLS.description}) VALUES (?)",
                (description,),
            )
            row = self._select_one(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = self._select_one(conn, todo_id)
            return self._row_to_entity(row) if row else None

    def list(self) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.created_at} ASC, {_COLS.id} ASC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update(self, todo_id: int, completed: bool) -> Optional[TodoEntity]:
        with self._conn() as conn:
            cur = conn.execute(
                f"UPDATE {_COLS.table} SET {_COLS.completed} = ? WHERE {_COLS.id} = ?",
                (1 if completed else 0, todo_id),
            )
            if cur.rowcount == 0:
                return None
            row = self._select_one(conn, todo_id)
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, todo_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0
