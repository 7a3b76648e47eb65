"""Exception types raised by ccsessionctl."""
from __future__ import annotations

from pathlib import Path


class SessionCtlError(Exception):
    """Base class for ccsessionctl errors."""


class SessionReadError(SessionCtlError, OSError):
    """A session transcript could not be opened or read."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Failed to open {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ActionError(SessionCtlError):
    """A delete, export or archive action failed for one session."""

    def __init__(self, action: str, session_id: str, path: Path, reason: str = "") -> None:
        self.action = action
        self.session_id = session_id
        self.path = Path(path)
        self.reason = reason
        message = f"{action} failed for {session_id} ({self.path})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
