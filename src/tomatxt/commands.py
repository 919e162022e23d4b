"""
Command surface consumed by the presentation client.

``CommandAPI`` has one method per client command. Note commands go through
the ``NoteStore``; timer commands go straight to the ``TimerEngine`` and the
resulting session is persisted so a restart resumes it. Every method returns
the response schema the client renders.
"""
from __future__ import annotations

from functools import lru_cache
from threading import RLock
from typing import List, Optional

from . import checklist
from .models import NoteEntity
from .repositories import NoteRepository, get_repository
from .schemas import ChecklistItemOut, NoteOut, TimerStateOut
from .settings import Settings, get_settings
from .store import NoteStore
from .timer import TimerEngine, TimerSession, format_seconds


# PUBLIC_INTERFACE
class CommandAPI:
    """Composes the note store and the timer engine behind the client's command table."""

    def __init__(self, repo: NoteRepository, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._repo = repo
        self.notes = NoteStore(repo)
        self.timer = TimerEngine(
            repo.load_timer(),
            work_minutes=self._settings.default_work_minutes,
            break_minutes=self._settings.default_break_minutes,
        )
        self._timer_lock = RLock()

    def _note_out(self, note: NoteEntity, child_count: int) -> NoteOut:
        stripped = checklist.strip_checkboxes(note["content"])
        limit = self._settings.preview_length
        preview = f"{stripped[:limit]}..." if len(stripped) > limit else stripped
        completed, percent = checklist.progress(checklist.parse(note["content"]))
        return NoteOut(
            id=note["id"],
            title=note["title"],
            content=note["content"],
            parent_id=note["parent_id"],
            is_done=note["is_done"],
            content_preview=preview,
            content_without_checkboxes=stripped,
            child_count=child_count,
            completed_count=completed,
            progress=percent,
            created_at=note["created_at"],
            updated_at=note["updated_at"],
        )

    def _with_count(self, note: NoteEntity) -> NoteOut:
        return self._note_out(note, self.notes.child_counts([note["id"]]).get(note["id"], 0))

    def _timer_out(self, session: TimerSession) -> TimerStateOut:
        return TimerStateOut(
            phase=session.phase,
            work_duration=session.work_duration,
            break_duration=session.break_duration,
            remaining=session.remaining,
            is_paused=session.is_paused,
            remaining_formatted=format_seconds(session.remaining),
            is_finished=session.is_finished,
        )

    def _run_timer(self, operation):
        with self._timer_lock:
            before = self.timer.snapshot()
            result = operation()
            after = self.timer.snapshot()
            if after != before:
                self._repo.save_timer(after)
            return result

    # Notes

    def create_note(self, title: str, content: str) -> NoteOut:
        return self._with_count(self.notes.create(title, content))

    def get_notes(self) -> List[NoteOut]:
        return [self._note_out(note, count) for note, count in self.notes.list_top_level()]

    def get_note(self, note_id: int) -> NoteOut:
        return self._with_count(self.notes.get(note_id))

    def update_note(self, note_id: int, title: str, content: str) -> NoteOut:
        return self._with_count(self.notes.update(note_id, title, content))

    def delete_note(self, note_id: int) -> None:
        self.notes.delete(note_id)

    def get_child_notes(self, parent_id: int) -> List[NoteOut]:
        return [self._note_out(child, 0) for child in self.notes.list_children(parent_id)]

    def update_note_status(self, note_id: int, is_done: bool) -> None:
        self.notes.set_done(note_id, is_done)

    def parse_checkboxes(self, content: str) -> List[ChecklistItemOut]:
        return [ChecklistItemOut(text=i.text, completed=i.completed) for i in checklist.parse(content)]

    def update_note_checkbox_status(self, note_id: int, checkbox_text: str, new_status: bool) -> NoteOut:
        return self._with_count(self.notes.set_checkbox_status(note_id, checkbox_text, new_status))

    # Timer

    def get_timer_state(self) -> TimerStateOut:
        return self._timer_out(self.timer.snapshot())

    def init_timer(self, work_min: int, break_min: int) -> TimerStateOut:
        return self._timer_out(self._run_timer(lambda: self.timer.init(work_min, break_min)))

    def configure_timer(self, work_min: Optional[int] = None, break_min: Optional[int] = None) -> TimerStateOut:
        return self._timer_out(self._run_timer(lambda: self.timer.configure(work_min, break_min)))

    def pause_timer(self) -> None:
        self._run_timer(self.timer.pause)

    def resume_timer(self) -> None:
        self._run_timer(self.timer.resume)

    def tick_timer(self) -> str:
        return self._run_timer(self.timer.tick)

    def start_break(self) -> TimerStateOut:
        return self._timer_out(self._run_timer(self.timer.start_break))

    def start_work(self) -> TimerStateOut:
        return self._timer_out(self._run_timer(self.timer.start_work))

    def reset_timer(self) -> TimerStateOut:
        return self._timer_out(self._run_timer(self.timer.reset))


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_command_api() -> CommandAPI:
    """Return the process-wide CommandAPI built from settings."""
    settings = get_settings()
    return CommandAPI(get_repository(settings), settings)
