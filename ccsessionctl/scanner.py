"""Discover Claude Code session transcripts on disk."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ccsessionctl import config
from ccsessionctl.date_utils import modified_from_stat
from ccsessionctl.models import Session

logger = logging.getLogger("ccsessionctl.scanner")

SESSION_SUFFIX = ".jsonl"

__all__ = [
    "decode_project_path",
    "get_project_names",
    "project_from_dir_name",
    "scan_project_sessions",
    "scan_sessions",
]


def project_from_dir_name(raw_name: str) -> str:
    """Short project name from Claude's encoded directory name.

    ``-home-pknull-Projects-threshold`` -> ``threshold``.
    """
    name = raw_name.rsplit("-", 1)[-1]
    return name or raw_name


def decode_project_path(raw_name: str) -> str:
    """Best-effort working directory from the encoded name.

    ``-home-pknull-dotfiles`` -> ``/home/pknull/dotfiles``. Dashes that were
    part of the original path cannot be told apart from separators.
    """
    path = raw_name[1:] if raw_name.startswith("-") else raw_name
    return "/" + path.replace("-", "/")


def get_project_names(sessions: Iterable[Session]) -> list[str]:
    """Sorted, de-duplicated project names."""
    return sorted({session.project for session in sessions})


def scan_project_sessions(project_dir: Path) -> list[Session]:
    """Build a Session for every transcript directly inside ``project_dir``."""
    raw_name = project_dir.name
    project = project_from_dir_name(raw_name)
    sessions: list[Session] = []

    for path in sorted(project_dir.iterdir()):
        if path.suffix != SESSION_SUFFIX or not path.is_file():
            continue
        try:
            stats = path.stat()
        except OSError as exc:
            logger.warning("Skipping unreadable session file %s: %s", path, exc)
            continue
        sessions.append(
            Session.new(
                id=path.stem,
                project=project,
                project_raw=raw_name,
                path=path,
                size_bytes=stats.st_size,
                modified=modified_from_stat(stats),
            )
        )

    return sessions


def scan_sessions(projects_dir: Optional[Path] = None) -> list[Session]:
    """Scan every non-hidden project directory, newest session first."""
    projects_dir = Path(projects_dir) if projects_dir is not None else config.PROJECTS_DIR
    sessions: list[Session] = []
    if not projects_dir.exists():
        logger.info("Projects directory %s does not exist", projects_dir)
        return sessions

    for project_dir in sorted(projects_dir.iterdir()):
        if not project_dir.is_dir() or project_dir.name.startswith("."):
            continue
        try:
            sessions.extend(scan_project_sessions(project_dir))
        except OSError as exc:
            logger.warning("Skipping project directory %s: %s", project_dir, exc)

    sessions.sort(key=lambda session: session.modified, reverse=True)
    logger.debug("Discovered %d session(s) under %s", len(sessions), projects_dir)
    return sessions
