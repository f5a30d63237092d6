# load_timer/errors.py
from __future__ import annotations


class LoadTimerError(Exception):
    """Base class for every error raised by load_timer."""


class InvalidFrameRateError(LoadTimerError, ValueError):
    def __init__(self, fps) -> None:
        super().__init__(f"fps must be a positive number, got {fps!r}")
        self.fps = fps


class UnknownItemError(LoadTimerError, KeyError):
    def __init__(self, item_id) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"no timing item with id {self.item_id!r}"


class ExportError(LoadTimerError):
    """Raised when a session cannot be exported yet (run start/end unset)."""


class ReadOnlyModeError(LoadTimerError):
    """Raised when a verifier-mode controller is asked to add or delete loads."""
