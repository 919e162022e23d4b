"""
Pomodoro timer engine.

One global session alternates between a work phase and a break phase. The
engine keeps no clock of its own: the presentation client calls ``tick()``
once per elapsed second and reads back the remaining time. A phase that has
run down to zero stays there until the caller asks for a transition.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .exceptions import AlreadyExpiredError, InvalidConfigError, InvalidTransitionError
from .logger import get_logger

logger = get_logger(__name__)


class Phase(str, Enum):
    WORK = "work"
    BREAK = "break"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class TimerSession:
    """
    State of the timer session. Durations and ``remaining`` are in seconds.

    ``0 <= remaining <= duration of the current phase`` always holds.
    """

    phase: Phase
    work_duration: int
    break_duration: int
    remaining: int
    is_paused: bool

    @property
    def is_finished(self) -> bool:
        return self.remaining == 0


def to_seconds(minutes: int) -> int:
    return minutes * 60


def format_seconds(seconds: int) -> str:
    """Format seconds as ``MM:SS``; minutes are not wrapped into hours."""
    minutes, secs = divmod(max(seconds, 0), 60)
    return f"{minutes:02d}:{secs:02d}"


def _validate_minutes(name: str, value: object) -> int:
    # bool is an int subclass but never a meaningful duration
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidConfigError(f"{name} must be a positive whole number of minutes, got {value!r}")
    return value


# PUBLIC_INTERFACE
class TimerEngine:
    """Caller-driven state machine over a single ``TimerSession``."""

    def __init__(self, session: Optional[TimerSession] = None, work_minutes: int = 25, break_minutes: int = 5) -> None:
        if session is None:
            session = self._fresh_session(work_minutes, break_minutes)
        self._session = session

    @staticmethod
    def _fresh_session(work_minutes: int, break_minutes: int) -> TimerSession:
        work = to_seconds(_validate_minutes("work_minutes", work_minutes))
        brk = to_seconds(_validate_minutes("break_minutes", break_minutes))
        return TimerSession(
            phase=Phase.WORK,
            work_duration=work,
            break_duration=brk,
            remaining=work,
            is_paused=True,
        )

    def init(self, work_minutes: int, break_minutes: int) -> TimerSession:
        """Replace the session with a paused work phase of the given lengths."""
        self._session = self._fresh_session(work_minutes, break_minutes)
        logger.info(f"Timer initialised: work={work_minutes}m break={break_minutes}m")
        return self._session

    def snapshot(self) -> TimerSession:
        return self._session

    def pause(self) -> None:
        if not self._session.is_paused:
            self._session = replace(self._session, is_paused=True)
            logger.info(f"Timer paused at {self.format_remaining()}")

    def resume(self) -> None:
        if self._session.remaining == 0:
            raise AlreadyExpiredError(f"{self._session.phase.value} phase has no time left")
        if self._session.is_paused:
            self._session = replace(self._session, is_paused=False)
            logger.info(f"Timer resumed at {self.format_remaining()}")

    def tick(self) -> str:
        """Count down one second unless paused or expired; return the remaining time."""
        s = self._session
        if not s.is_paused and s.remaining > 0:
            self._session = replace(s, remaining=s.remaining - 1)
            logger.debug(f"Tick: {self.format_remaining()} left in {s.phase.value} phase")
            if self._session.remaining == 0:
                logger.info(f"Timer {s.phase.value} phase finished")
        return self.format_remaining()

    def start_break(self) -> TimerSession:
        s = self._session
        if s.phase is Phase.BREAK:
            raise InvalidTransitionError("Already on a break")
        self._session = replace(s, phase=Phase.BREAK, remaining=s.break_duration, is_paused=False)
        logger.info("Timer switched to break phase")
        return self._session

    def start_work(self) -> TimerSession:
        s = self._session
        if s.phase is Phase.WORK:
            raise InvalidTransitionError("Already in a work phase")
        self._session = replace(s, phase=Phase.WORK, remaining=s.work_duration, is_paused=False)
        logger.info("Timer switched to work phase")
        return self._session

    def reset(self) -> TimerSession:
        """Go back to a paused, full work phase whatever the current phase is."""
        s = self._session
        self._session = replace(s, phase=Phase.WORK, remaining=s.work_duration, is_paused=True)
        logger.info("Timer reset")
        return self._session

    def configure(self, work_minutes: Optional[int] = None, break_minutes: Optional[int] = None) -> TimerSession:
        """
        Change phase lengths mid-session.

        Changing the length of the current phase restarts its countdown from the
        new length; the pause flag is left alone.
        """
        s = self._session
        if work_minutes is not None:
            work = to_seconds(_validate_minutes("work_minutes", work_minutes))
            s = replace(s, work_duration=work, remaining=work if s.phase is Phase.WORK else s.remaining)
        if break_minutes is not None:
            brk = to_seconds(_validate_minutes("break_minutes", break_minutes))
            s = replace(s, break_duration=brk, remaining=brk if s.phase is Phase.BREAK else s.remaining)
        self._session = s
        logger.info(f"Timer reconfigured: work={s.work_duration}s break={s.break_duration}s")
        return self._session

    def is_finished(self) -> bool:
        return self._session.is_finished

    def format_remaining(self) -> str:
        return format_seconds(self._session.remaining)
