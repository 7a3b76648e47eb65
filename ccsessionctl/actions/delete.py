"""Delete session transcripts and their auxiliary directories."""
from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from ccsessionctl.errors import ActionError
from ccsessionctl.models import Session

logger = logging.getLogger("ccsessionctl.actions")


def delete_session(session: Session) -> None:
    """Remove the transcript and, if present, its sibling directory."""
    try:
        session.path.unlink()
    except OSError as exc:
        raise ActionError("delete", session.id, session.path, str(exc)) from exc

    directory = session.directory
    if directory.is_dir():
        try:
            shutil.rmtree(directory)
        except OSError as exc:
            raise ActionError("delete", session.id, directory, str(exc)) from exc


def delete_sessions(sessions: Iterable[Session]) -> int:
    """Delete each session, returning how many succeeded."""
    deleted = 0
    for session in sessions:
        try:
            delete_session(session)
        except ActionError as exc:
            logger.warning("%s", exc)
            continue
        deleted += 1
    logger.info("Deleted %d session(s)", deleted)
    return deleted


def can_delete(path: Path) -> bool:
    """True when ``path`` exists and its parent directory is writable."""
    path = Path(path)
    return path.exists() and os.access(path.parent, os.W_OK)
