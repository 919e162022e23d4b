from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..commands import CommandAPI, get_command_api
from ..schemas import (
    CheckboxParseRequest,
    CheckboxStatusUpdate,
    ChecklistItemOut,
    NoteCreate,
    NoteOut,
    NoteStatusUpdate,
    NoteUpdate,
)

router = APIRouter(
    prefix="/api/v1/notes",
    tags=["notes"],
)

_NOT_FOUND = {404: {"description": "Note not found"}}


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Note",
    description="Create a top-level note. Checkbox lines in the content become child notes.",
    responses={201: {"description": "Note created successfully"}},
)
def create_note(payload: NoteCreate, api: CommandAPI = Depends(get_command_api)) -> NoteOut:
    """Create a new note."""
    return api.create_note(payload.title, payload.content)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[NoteOut],
    summary="List Notes",
    description="List top-level notes, oldest first, each with its child count.",
)
def get_notes(api: CommandAPI = Depends(get_command_api)) -> List[NoteOut]:
    """List top-level notes."""
    return api.get_notes()


# PUBLIC_INTERFACE
@router.post(
    "/parse-checkboxes",
    response_model=List[ChecklistItemOut],
    summary="Parse Checkboxes",
    description="Return the checkbox lines found in arbitrary content, in order. Nothing is stored.",
)
def parse_checkboxes(payload: CheckboxParseRequest, api: CommandAPI = Depends(get_command_api)) -> List[ChecklistItemOut]:
    """Parse checkbox lines from content."""
    return api.parse_checkboxes(payload.content)


# PUBLIC_INTERFACE
@router.get(
    "/{note_id}",
    response_model=NoteOut,
    summary="Get Note",
    responses=_NOT_FOUND,
)
def get_note(note_id: int, api: CommandAPI = Depends(get_command_api)) -> NoteOut:
    """Retrieve a single note by its ID."""
    return api.get_note(note_id)


# PUBLIC_INTERFACE
@router.put(
    "/{note_id}",
    response_model=NoteOut,
    summary="Update Note",
    description=(
        "Replace a note's title and content and resynchronize its child notes. "
        "Renaming a child note rewrites its checkbox line in the parent."
    ),
    responses=_NOT_FOUND,
)
def update_note(note_id: int, payload: NoteUpdate, api: CommandAPI = Depends(get_command_api)) -> NoteOut:
    """Replace a note's title and content."""
    return api.update_note(note_id, payload.title, payload.content)


# PUBLIC_INTERFACE
@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Note",
    description="Delete a note. Deleting a parent also deletes its child notes.",
    responses=_NOT_FOUND,
)
def delete_note(note_id: int, api: CommandAPI = Depends(get_command_api)) -> None:
    """Delete a note. Returns 204 on success, 404 if not found."""
    api.delete_note(note_id)
    return None


# PUBLIC_INTERFACE
@router.get(
    "/{note_id}/children",
    response_model=List[NoteOut],
    summary="Get Child Notes",
    description="List the child notes of a note in checkbox-line order.",
    responses=_NOT_FOUND,
)
def get_child_notes(note_id: int, api: CommandAPI = Depends(get_command_api)) -> List[NoteOut]:
    """List the child notes of a note."""
    return api.get_child_notes(note_id)


# PUBLIC_INTERFACE
@router.put(
    "/{note_id}/status",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update Note Status",
    description="Set a note's completion flag; for a child note its checkbox line is updated too.",
    responses=_NOT_FOUND,
)
def update_note_status(note_id: int, payload: NoteStatusUpdate, api: CommandAPI = Depends(get_command_api)) -> None:
    """Set the completion flag of a note."""
    api.update_note_status(note_id, payload.is_done)
    return None


# PUBLIC_INTERFACE
@router.put(
    "/{note_id}/checkboxes",
    response_model=NoteOut,
    summary="Update Note Checkbox Status",
    description="Check or uncheck a checkbox line of a note by its text.",
    responses={404: {"description": "Note or checkbox text not found"}},
)
def update_note_checkbox_status(
    note_id: int, payload: CheckboxStatusUpdate, api: CommandAPI = Depends(get_command_api)
) -> NoteOut:
    """Check or uncheck a checkbox line by its text."""
    return api.update_note_checkbox_status(note_id, payload.checkbox_text, payload.new_status)
