from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from .timer import Phase


def _validate_title(v: str) -> str:
    if v is None:
        raise ValueError("title is required")
    s = v.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError("title length must be between 1 and 200 characters")
    return s


# PUBLIC_INTERFACE
class NoteCreate(BaseModel):
    """
    Schema for creating a new top-level note.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Groceries",
                "content": "For the weekend\n- [ ] milk\n- [x] eggs",
            }
        }
    )

    title: str = Field(..., description="Note title", min_length=1, max_length=200)
    content: str = Field(default="", description="Free text; '- [ ] text' lines become child notes")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _validate_title(v)


# PUBLIC_INTERFACE
class NoteUpdate(BaseModel):
    """
    Schema for replacing a note's title and content.

    A child note's title is its checkbox text, which content does not limit in
    length, so only a non-blank title is required here.
    """

    model_config = NoteCreate.model_config

    title: str = Field(..., description="Note title", min_length=1)
    content: str = Field(default="", description="Free text; '- [ ] text' lines become child notes")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and require a non-blank title.
        """
        s = v.strip()
        if not s:
            raise ValueError("title must not be blank")
        return s


# PUBLIC_INTERFACE
class NoteStatusUpdate(BaseModel):
    is_done: bool = Field(..., description="New completion flag")


# PUBLIC_INTERFACE
class CheckboxStatusUpdate(BaseModel):
    """
    Schema for checking or unchecking a checkbox line by its text.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"checkbox_text": "milk", "new_status": True}}
    )

    checkbox_text: str = Field(..., description="Literal text of the checkbox line", min_length=1)
    new_status: bool = Field(..., description="True to check, False to uncheck")


# PUBLIC_INTERFACE
class CheckboxParseRequest(BaseModel):
    content: str = Field(default="", description="Content to scan for checkbox lines")


# PUBLIC_INTERFACE
class ChecklistItemOut(BaseModel):
    text: str = Field(..., description="Checkbox text")
    completed: bool = Field(..., description="Whether the checkbox is checked")


# PUBLIC_INTERFACE
class NoteOut(BaseModel):
    """
    Schema returned by the API for a note, including derived fields.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 7,
                "title": "Groceries",
                "content": "For the weekend\n- [ ] milk\n- [x] eggs",
                "parent_id": None,
                "is_done": False,
                "content_preview": "For the weekend",
                "content_without_checkboxes": "For the weekend",
                "child_count": 2,
                "completed_count": 1,
                "progress": 50.0,
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the note")
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Free text content")
    parent_id: Optional[int] = Field(default=None, description="Parent note id for checklist children")
    is_done: bool = Field(..., description="Completion flag")
    content_preview: str = Field(..., description="Truncated content without checkbox lines")
    content_without_checkboxes: str = Field(..., description="Content without checkbox lines")
    child_count: int = Field(..., description="Number of child notes")
    completed_count: int = Field(..., description="Number of checked checkbox lines")
    progress: float = Field(..., description="Percentage of checked checkbox lines")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class TimerInit(BaseModel):
    """
    Schema for starting a fresh timer session. Durations are whole minutes.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"work_min": 25, "break_min": 5}})

    work_min: StrictInt = Field(..., description="Work phase length in minutes")
    break_min: StrictInt = Field(..., description="Break phase length in minutes")


# PUBLIC_INTERFACE
class TimerConfigure(BaseModel):
    work_min: Optional[StrictInt] = Field(default=None, description="New work phase length in minutes")
    break_min: Optional[StrictInt] = Field(default=None, description="New break phase length in minutes")


# PUBLIC_INTERFACE
class TimerStateOut(BaseModel):
    """
    Schema returned for the timer session. Durations are in seconds.
    """

    phase: Phase = Field(..., description="Current phase: work or break")
    work_duration: int = Field(..., description="Work phase length in seconds")
    break_duration: int = Field(..., description="Break phase length in seconds")
    remaining: int = Field(..., description="Seconds left in the current phase")
    is_paused: bool = Field(..., description="Whether the countdown is paused")
    remaining_formatted: str = Field(..., description="Remaining time as MM:SS")
    is_finished: bool = Field(..., description="True when the current phase has run out")


# PUBLIC_INTERFACE
class TickOut(BaseModel):
    remaining: str = Field(..., description="Remaining time as MM:SS")
