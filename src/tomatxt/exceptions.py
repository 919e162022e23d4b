"""
Application exceptions.

Every failure the note store or the timer engine reports to a caller is one of
these. They are recoverable outcomes of a single command; the HTTP layer maps
them to status codes in ``main.py``.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised for an unknown note id, or checkbox text no longer present in a note."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class InvalidConfigError(ApplicationError):
    """Raised when timer durations are not positive whole minutes."""

    def __init__(self, message: str = "Timer durations must be positive minutes") -> None:
        super().__init__(message, code="TIMER_INVALID_CONFIG")


class InvalidTransitionError(ApplicationError):
    """Raised when a phase change is requested from the wrong phase."""

    def __init__(self, message: str = "Invalid timer transition") -> None:
        super().__init__(message, code="TIMER_INVALID_TRANSITION")


class AlreadyExpiredError(ApplicationError):
    """Raised when resuming a phase that has no time left."""

    def __init__(self, message: str = "Timer phase has already expired") -> None:
        super().__init__(message, code="TIMER_ALREADY_EXPIRED")
