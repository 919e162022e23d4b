from __future__ import annotations

import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Generator, Iterable, List, Optional

from .logger import get_logger
from .models import NoteEntity
from .repositories import NoteRepository
from .timer import Phase, TimerSession

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "notes"
    id: str = "id"
    title: str = "title"
    content: str = "content"
    parent_id: str = "parent_id"
    is_done: str = "is_done"
    position: str = "position"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()
_TIMER_TABLE = "timer_session"


class SQLiteRepository(NoteRepository):
    """
    SQLite repository implementing the NoteRepository interface.

    Each primitive opens its own connection, except inside ``transaction()``
    where the calling thread reuses one connection until commit or rollback.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._local = threading.local()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        if getattr(self._local, "conn", None) is not None:
            # Nested: the outer transaction owns commit and rollback.
            yield
            return
        conn = self._connect()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.content} TEXT NOT NULL DEFAULT '',
                    {_COLS.parent_id} INTEGER NULL REFERENCES {_COLS.table}({_COLS.id}) ON DELETE CASCADE,
                    {_COLS.is_done} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.position} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_parent_id ON {_COLS.table}({_COLS.parent_id})"
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_TIMER_TABLE} (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    phase TEXT NOT NULL,
                    work_duration INTEGER NOT NULL,
                    break_duration INTEGER NOT NULL,
                    remaining INTEGER NOT NULL,
                    is_paused INTEGER NOT NULL
                )
                """
            )
        logger.debug(f"SQLite repository ready at {self._db_path}")

    def _row_to_entity(self, row: sqlite3.Row) -> NoteEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "content": str(row[_COLS.content]),
            "parent_id": int(row[_COLS.parent_id]) if row[_COLS.parent_id] is not None else None,
            "is_done": bool(row[_COLS.is_done]),
            "position": int(row[_COLS.position]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _fetch(self, conn: sqlite3.Connection, note_id: int) -> Optional[NoteEntity]:
        row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (note_id,)).fetchone()
        return self._row_to_entity(row) if row else None

    def insert(
        self,
        title: str,
        content: str,
        parent_id: Optional[int] = None,
        is_done: bool = False,
        position: int = 0,
    ) -> NoteEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.content}, {_COLS.parent_id},
                    {_COLS.is_done}, {_COLS.position}, {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (title, content, parent_id, 1 if is_done else 0, position, now, now),
            )
            entity = self._fetch(conn, cur.lastrowid)
            assert entity is not None
            return entity

    def get(self, note_id: int) -> Optional[NoteEntity]:
        with self._conn() as conn:
            return self._fetch(conn, note_id)

    def save(self, entity: NoteEntity) -> NoteEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.content} = ?, {_COLS.is_done} = ?,
                    {_COLS.position} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    entity["title"],
                    entity["content"],
                    1 if entity["is_done"] else 0,
                    entity["position"],
                    entity["updated_at"].isoformat(),
                    entity["id"],
                ),
            )
            if cur.rowcount == 0:
                raise KeyError(entity["id"])
            saved = self._fetch(conn, entity["id"])
            assert saved is not None
            return saved

    def delete_many(self, note_ids: Iterable[int]) -> int:
        ids = list(set(note_ids))
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} IN ({placeholders})", ids)
            return cur.rowcount

    def list_top_level(self) -> List[NoteEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                WHERE {_COLS.parent_id} IS NULL
                ORDER BY {_COLS.created_at} ASC, {_COLS.id} ASC
                """
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def list_children(self, parent_id: int) -> List[NoteEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                WHERE {_COLS.parent_id} = ?
                ORDER BY {_COLS.position} ASC, {_COLS.id} ASC
                """,
                (parent_id,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def child_counts(self, parent_ids: Iterable[int]) -> Dict[int, int]:
        counts = {i: 0 for i in parent_ids}
        if not counts:
            return counts
        placeholders = ", ".join("?" for _ in counts)
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLS.parent_id} AS pid, COUNT(*) AS cnt FROM {_COLS.table}
                WHERE {_COLS.parent_id} IN ({placeholders})
                GROUP BY {_COLS.parent_id}
                """,
                list(counts),
            ).fetchall()
        for row in rows:
            counts[int(row["pid"])] = int(row["cnt"])
        return counts

    def load_timer(self) -> Optional[TimerSession]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_TIMER_TABLE} WHERE id = 1").fetchone()
        if row is None:
            return None
        return TimerSession(
            phase=Phase(row["phase"]),
            work_duration=int(row["work_duration"]),
            break_duration=int(row["break_duration"]),
            remaining=int(row["remaining"]),
            is_paused=bool(row["is_paused"]),
        )

    def save_timer(self, session: TimerSession) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO {_TIMER_TABLE}
                    (id, phase, work_duration, break_duration, remaining, is_paused)
                VALUES (1, ?, ?, ?, ?, ?)
                """,
                (
                    session.phase.value,
                    session.work_duration,
                    session.break_duration,
                    session.remaining,
                    1 if session.is_paused else 0,
                ),
            )
