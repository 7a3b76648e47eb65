"""Text helpers for rendering sessions: labels, sizes, preview buffers."""
from __future__ import annotations

from ccsessionctl.date_utils import format_utc
from ccsessionctl.models import DisplayMessage, Session
from ccsessionctl.parsers.content import truncate_message

PREVIEW_LABEL_LIMIT = 50
SHORT_ID_LENGTH = 12
EMPTY_LABEL = "(empty)"
_SIZE_UNITS = ("KiB", "MiB", "GiB", "TiB")


def get_session_preview(session: Session) -> str:
    """One-line label for the session list.

    Priority: custom title, first user message, summary (summaries can be
    stale), message count, then the session id.
    """
    if session.custom_title is not None:
        return truncate_message(session.custom_title, PREVIEW_LABEL_LIMIT)
    if session.first_message is not None:
        return truncate_message(session.first_message, PREVIEW_LABEL_LIMIT)
    if session.summary is not None:
        return truncate_message(session.summary, PREVIEW_LABEL_LIMIT)

    count = session.message_count or 0
    if count > 0:
        return f"[{count} message{'' if count == 1 else 's'}]"

    short_id = session.id
    if len(short_id) > SHORT_ID_LENGTH:
        short_id = f"{short_id[:SHORT_ID_LENGTH]}..."
    return f"[{short_id}]"


def is_empty_session(session: Session) -> bool:
    """Scanned session with no title, no user text, no summary and no messages."""
    return (
        session.is_scanned
        and not session.message_count
        and session.custom_title is None
        and session.first_message is None
        and session.summary is None
    )


def build_preview_lines(messages: list[DisplayMessage]) -> list[str]:
    """Flatten messages into the line buffer the preview pane scrolls over."""
    lines: list[str] = []
    for message in messages:
        lines.append(f"[{message.role.label}] {format_utc(message.timestamp)}")
        lines.append("")
        lines.extend(message.content.splitlines())
        lines.append("")
    return lines


def format_tokens(tokens: int) -> str:
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


def format_size(size_bytes: int) -> str:
    """Binary-prefixed size (``1.5 KiB``)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    value = size_bytes / 1024
    for unit in _SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} {_SIZE_UNITS[-1]}"
