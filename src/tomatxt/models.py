from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class NoteEntity(TypedDict):
    """
    Stored representation of a note, shared by all repository backends.

    Fields:
    - id: Unique integer identifier, never reused
    - title: Note title; for a child note, the text of its checkbox line
    - content: Free-form text, possibly containing checkbox lines
    - parent_id: Id of the parent note, or None for top-level notes
    - is_done: Completion flag, mirrors the parent's checkbox marker for children
    - position: Index of the backing checkbox line among the parent's checkbox lines
    - created_at: Creation timestamp
    - updated_at: Last update timestamp
    """

    id: int
    title: str
    content: str
    parent_id: Optional[int]
    is_done: bool
    position: int
    created_at: datetime
    updated_at: datetime
