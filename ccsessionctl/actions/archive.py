"""Compressed tar archives of session transcripts."""
from __future__ import annotations

import logging
import tarfile
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ccsessionctl import config
from ccsessionctl.errors import ActionError
from ccsessionctl.models import Session

logger = logging.getLogger("ccsessionctl.actions")


def _add_session(archive: tarfile.TarFile, session: Session, file_name: str, dir_name: str) -> None:
    archive.add(session.path, arcname=file_name)
    if session.directory.is_dir():
        archive.add(session.directory, arcname=dir_name, recursive=True)


def archive_session(session: Session, output_dir: Path) -> Path:
    """Write ``{project}_{id}.tar.gz`` holding the transcript and its directory."""
    archive_path = Path(output_dir) / f"{session.project}_{session.id}.tar.gz"
    try:
        with tarfile.open(archive_path, "w:gz") as archive:
            _add_session(archive, session, session.path.name, session.directory.name)
    except (OSError, tarfile.TarError) as exc:
        raise ActionError("archive", session.id, archive_path, str(exc)) from exc
    return archive_path


def archive_sessions(sessions: Iterable[Session], output_path: Path) -> int:
    """Write all sessions into one tarball, grouped as ``{project}/{id}``.

    Returns the number of sessions added.
    """
    output_path = Path(output_path)
    added = 0
    try:
        with tarfile.open(output_path, "w:gz") as archive:
            for session in sessions:
                prefix = f"{session.project}/{session.id}"
                _add_session(archive, session, f"{prefix}.jsonl", prefix)
                added += 1
    except (OSError, tarfile.TarError) as exc:
        raise ActionError("archive", output_path.stem, output_path, str(exc)) from exc
    logger.info("Archived %d session(s) to %s", added, output_path)
    return added


def archive_each(sessions: Iterable[Session], output_dir: Path) -> list[Path]:
    """One archive per session; failures are logged and skipped."""
    paths: list[Path] = []
    for session in sessions:
        try:
            paths.append(archive_session(session, output_dir))
        except ActionError as exc:
            logger.warning("%s", exc)
    logger.info("Archived %d session(s) to %s", len(paths), output_dir)
    return paths


def default_archive_dir(base: Optional[Path] = None) -> Path:
    """Archive directory, created on first use."""
    archive_dir = Path(base) if base is not None else config.ARCHIVE_DIR
    archive_dir.mkdir(parents=True, exist_ok=True)
    return archive_dir
