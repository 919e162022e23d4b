from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Dict, Iterable, Iterator, List, Optional

from .models import NoteEntity
from .settings import Settings, get_settings
from .timer import TimerSession


# PUBLIC_INTERFACE
class NoteRepository(ABC):
    """
    Storage contract for notes and the timer session.

    Repositories know nothing about checklists; they store records. Callers
    group several primitives into one atomic unit with ``transaction()``.
    """

    @abstractmethod
    def insert(
        self,
        title: str,
        content: str,
        parent_id: Optional[int] = None,
        is_done: bool = False,
        position: int = 0,
    ) -> NoteEntity:
        """Store a new note with a freshly allocated id and return it."""

    @abstractmethod
    def get(self, note_id: int) -> Optional[NoteEntity]:
        """Return a note by id, or None if not found."""

    @abstractmethod
    def save(self, entity: NoteEntity) -> NoteEntity:
        """Overwrite the mutable fields of an existing note and return it."""

    @abstractmethod
    def delete_many(self, note_ids: Iterable[int]) -> int:
        """Delete the given notes. Return how many existed."""

    @abstractmethod
    def list_top_level(self) -> List[NoteEntity]:
        """Return notes without a parent, oldest first."""

    @abstractmethod
    def list_children(self, parent_id: int) -> List[NoteEntity]:
        """Return the children of a note ordered by position."""

    @abstractmethod
    def child_counts(self, parent_ids: Iterable[int]) -> Dict[int, int]:
        """Return the number of children for each of the given note ids."""

    @abstractmethod
    def transaction(self):
        """Context manager; every primitive inside commits or rolls back together."""

    @abstractmethod
    def load_timer(self) -> Optional[TimerSession]:
        """Return the persisted timer session, if any."""

    @abstractmethod
    def save_timer(self, session: TimerSession) -> None:
        """Persist the timer session, replacing the previous one."""


class InMemoryRepository(NoteRepository):
    """
    Thread-safe in-memory repository suitable for testing.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, NoteEntity] = {}
        self._next_id = 1
        self._timer: Optional[TimerSession] = None

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def insert(
        self,
        title: str,
        content: str,
        parent_id: Optional[int] = None,
        is_done: bool = False,
        position: int = 0,
    ) -> NoteEntity:
        now = self._now()
        entity: NoteEntity = {
            "id": self._allocate_id(),
            "title": title,
            "content": content,
            "parent_id": parent_id,
            "is_done": is_done,
            "position": position,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, note_id: int) -> Optional[NoteEntity]:
        with self._lock:
            item = self._items.get(note_id)
            return None if item is None else item.copy()

    def save(self, entity: NoteEntity) -> NoteEntity:
        with self._lock:
            if entity["id"] not in self._items:
                raise KeyError(entity["id"])
            self._items[entity["id"]] = entity.copy()
            return entity.copy()

    def delete_many(self, note_ids: Iterable[int]) -> int:
        with self._lock:
            return sum(1 for i in set(note_ids) if self._items.pop(i, None) is not None)

    def list_top_level(self) -> List[NoteEntity]:
        with self._lock:
            items = [n for n in self._items.values() if n["parent_id"] is None]
            return [n.copy() for n in sorted(items, key=lambda n: (n["created_at"], n["id"]))]

    def list_children(self, parent_id: int) -> List[NoteEntity]:
        with self._lock:
            items = [n for n in self._items.values() if n["parent_id"] == parent_id]
            return [n.copy() for n in sorted(items, key=lambda n: (n["position"], n["id"]))]

    def child_counts(self, parent_ids: Iterable[int]) -> Dict[int, int]:
        with self._lock:
            counts = {i: 0 for i in parent_ids}
            for n in self._items.values():
                if n["parent_id"] in counts:
                    counts[n["parent_id"]] += 1
            return counts

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            # Ids allocated inside a failed transaction stay consumed.
            snapshot = {i: n.copy() for i, n in self._items.items()}
            try:
                yield
            except BaseException:
                self._items = snapshot
                raise

    def load_timer(self) -> Optional[TimerSession]:
        return self._timer

    def save_timer(self, session: TimerSession) -> None:
        self._timer = session


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> NoteRepository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
