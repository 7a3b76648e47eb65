"""Markdown export of session transcripts."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ccsessionctl import config
from ccsessionctl.date_utils import format_utc
from ccsessionctl.errors import ActionError, SessionReadError
from ccsessionctl.models import Session
from ccsessionctl.parsers.sessions import load_session_messages

logger = logging.getLogger("ccsessionctl.actions")


def export_session_to_string(session: Session) -> str:
    """Render a session as Markdown. Raises ``SessionReadError`` if unreadable."""
    messages = load_session_messages(session.path)
    parts = [
        f"# Session: {session.id}\n\n",
        f"**Project:** {session.project}\n",
        f"**Date:** {format_utc(session.modified)} UTC\n",
    ]
    if session.summary is not None:
        parts.append(f"**Summary:** {session.summary}\n")
    parts.append("\n---\n\n")

    for message in messages:
        parts.append(f"### **{message.role.label}** ({format_utc(message.timestamp, '%H:%M:%S')})\n\n")
        parts.append(message.content)
        parts.append("\n\n")

    return "".join(parts)


def export_session_markdown(session: Session, output_dir: Path) -> Path:
    """Write ``{project}_{id}.md`` into ``output_dir`` and return its path."""
    output_path = Path(output_dir) / f"{session.project}_{session.id}.md"
    try:
        document = export_session_to_string(session)
        output_path.write_text(document, encoding="utf-8", errors="replace")
    except (SessionReadError, OSError) as exc:
        raise ActionError("export", session.id, output_path, str(exc)) from exc
    return output_path


def export_sessions_markdown(sessions: Iterable[Session], output_dir: Path) -> list[Path]:
    """Export each session; failures are logged and left out of the result."""
    paths: list[Path] = []
    for session in sessions:
        try:
            paths.append(export_session_markdown(session, output_dir))
        except ActionError as exc:
            logger.warning("%s", exc)
    logger.info("Exported %d session(s) to %s", len(paths), output_dir)
    return paths


def default_export_dir(base: Optional[Path] = None) -> Path:
    """Export directory, created on first use."""
    export_dir = Path(base) if base is not None else config.EXPORT_DIR
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir
