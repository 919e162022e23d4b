"""
Note store.

Owns notes and their one-level parent/child relationship. A parent's content
is authoritative: its children are a derived index of the checkbox lines in
that content, rebuilt by ``_reconcile`` after every content mutation. Edits
made through a child (toggling, renaming, deleting) are first written into
the parent's content and then reconciled, so there is only ever one writable
representation.

Every public method holds the store lock and runs inside one repository
transaction, so a command either applies fully (content and children) or not
at all.
"""
from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import Dict, Iterable, List, Tuple

from . import checklist
from .checklist import ReconcilePlan
from .exceptions import NotFoundError
from .logger import get_logger
from .models import NoteEntity
from .repositories import NoteRepository

logger = get_logger(__name__)


def _single_line(text: str) -> str:
    return " ".join(text.split())


# PUBLIC_INTERFACE
class NoteStore:
    """Notes, their checklist-derived children, and id assignment."""

    def __init__(self, repo: NoteRepository) -> None:
        self._repo = repo
        self._lock = RLock()

    def _now(self) -> datetime:
        return datetime.now()

    def _require(self, note_id: int) -> NoteEntity:
        note = self._repo.get(note_id)
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        return note

    def _touch(self, note: NoteEntity, **changes) -> NoteEntity:
        updated = note.copy()
        updated.update(changes)  # type: ignore[typeddict-item]
        updated["updated_at"] = self._now()
        return self._repo.save(updated)

    def _reconcile(self, parent: NoteEntity) -> ReconcilePlan:
        """Align the stored children of ``parent`` with the checklist in its content."""
        if parent["parent_id"] is not None:
            # children never have children
            return ReconcilePlan()

        items = checklist.parse(parent["content"])
        result = checklist.plan(self._repo.list_children(parent["id"]), items)
        if result.is_noop:
            return result

        if result.delete:
            self._repo.delete_many(child["id"] for child in result.delete)
        for child, position, item in result.updates:
            self._touch(child, position=position, is_done=item.completed)
        for position, item in result.create:
            self._repo.insert(item.text, "", parent_id=parent["id"], is_done=item.completed, position=position)

        logger.info(
            f"Reconciled note {parent['id']}: created={len(result.create)} "
            f"updated={len(result.updates)} deleted={len(result.delete)}"
        )
        return result

    def create(self, title: str, content: str) -> NoteEntity:
        with self._lock, self._repo.transaction():
            note = self._repo.insert(title, content)
            self._reconcile(note)
        logger.info(f"Created note {note['id']}")
        return note

    def get(self, note_id: int) -> NoteEntity:
        with self._lock:
            return self._require(note_id)

    def list_top_level(self) -> List[Tuple[NoteEntity, int]]:
        """Top-level notes oldest first, each paired with its child count."""
        with self._lock:
            notes = self._repo.list_top_level()
            counts = self._repo.child_counts(n["id"] for n in notes)
            return [(n, counts.get(n["id"], 0)) for n in notes]

    def list_children(self, parent_id: int) -> List[NoteEntity]:
        with self._lock:
            self._require(parent_id)
            return self._repo.list_children(parent_id)

    def child_counts(self, note_ids: Iterable[int]) -> Dict[int, int]:
        with self._lock:
            return self._repo.child_counts(note_ids)

    def update(self, note_id: int, title: str, content: str) -> NoteEntity:
        """
        Replace title and content.

        For a child note the title is its checkbox text, so a new title is
        written into the parent's checkbox line before reconciling the parent.
        """
        with self._lock, self._repo.transaction():
            note = self._require(note_id)
            if note["parent_id"] is None:
                note = self._touch(note, title=title, content=content)
                self._reconcile(note)
            else:
                parent = self._require(note["parent_id"])
                renamed = title.strip() != note["title"]
                new_title = _single_line(title) if renamed else note["title"]
                self._touch(note, title=new_title, content=content)
                if renamed:
                    parent = self._touch(
                        parent, content=checklist.rename_item(parent["content"], note["position"], new_title)
                    )
                    self._reconcile(parent)
            note = self._require(note_id)
        logger.info(f"Updated note {note_id}")
        return note

    def set_done(self, note_id: int, is_done: bool) -> NoteEntity:
        """Set a note's completion flag, mirroring it into the parent's checkbox line."""
        with self._lock, self._repo.transaction():
            note = self._require(note_id)
            if note["parent_id"] is None:
                note = self._touch(note, is_done=is_done)
            else:
                parent = self._require(note["parent_id"])
                parent = self._touch(
                    parent, content=checklist.set_item_status(parent["content"], note["position"], is_done)
                )
                self._reconcile(parent)
                note = self._require(note_id)
        logger.info(f"Set note {note_id} done={is_done}")
        return note

    def set_checkbox_status(self, parent_id: int, checkbox_text: str, new_status: bool) -> NoteEntity:
        """Check or uncheck the checkbox line with the given text in a note's content."""
        with self._lock, self._repo.transaction():
            parent = self._require(parent_id)
            index = checklist.find_item(parent["content"], checkbox_text, new_status)
            if index is None:
                raise NotFoundError(f"Checkbox {checkbox_text!r} not found in note {parent_id}")
            parent = self._touch(
                parent, content=checklist.set_item_status(parent["content"], index, new_status)
            )
            self._reconcile(parent)
        logger.info(f"Set checkbox {checkbox_text!r} of note {parent_id} to {new_status}")
        return parent

    def delete(self, note_id: int) -> None:
        """
        Delete a note.

        Deleting a parent deletes its children; deleting a child removes its
        checkbox line from the parent.
        """
        with self._lock, self._repo.transaction():
            note = self._require(note_id)
            if note["parent_id"] is None:
                children = self._repo.list_children(note_id)
                self._repo.delete_many([note_id, *(c["id"] for c in children)])
            else:
                parent = self._require(note["parent_id"])
                self._repo.delete_many([note_id])
                parent = self._touch(parent, content=checklist.remove_item(parent["content"], note["position"]))
                self._reconcile(parent)
        logger.info(f"Deleted note {note_id}")
