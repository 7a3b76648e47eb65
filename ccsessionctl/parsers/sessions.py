"""Derive session metadata and display messages from JSONL transcripts."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Optional

from ccsessionctl.errors import SessionReadError
from ccsessionctl.models import DisplayMessage, MessageRole, Session, SessionMetadata
from ccsessionctl.parsers.content import content_as_text, is_system_content, truncate_message
from ccsessionctl.parsers.records import (
    AssistantRecord,
    CustomTitleRecord,
    SummaryRecord,
    SystemRecord,
    UserRecord,
    iter_records,
)

logger = logging.getLogger("ccsessionctl.parsers")

FIRST_MESSAGE_LIMIT = 100
CHARS_PER_TOKEN = 4
SYSTEM_PLACEHOLDER = "[System]"


def scan_session_metadata(path: Path) -> SessionMetadata:
    """Read a whole transcript and accumulate its searchable/derived fields.

    ``token_count`` is a coarse estimate (characters / 4), not a tokenizer
    count. Raises ``SessionReadError`` if the file cannot be opened.
    """
    metadata = SessionMetadata()
    chunks: list[str] = []
    total_chars = 0

    for record in iter_records(path):
        if isinstance(record, SummaryRecord):
            chunks.append(record.summary)
            total_chars += len(record.summary)
            metadata.summary = record.summary
        elif isinstance(record, CustomTitleRecord):
            metadata.custom_title = record.custom_title
        elif isinstance(record, UserRecord):
            metadata.message_count += 1
            if metadata.created is None:
                metadata.created = record.timestamp
            text = content_as_text(record.message.content)
            if text:
                chunks.append(text)
                total_chars += len(text)
                if metadata.first_message is None and not is_system_content(record.message.content):
                    metadata.first_message = truncate_message(text, FIRST_MESSAGE_LIMIT)
        elif isinstance(record, AssistantRecord):
            metadata.message_count += 1
            text = content_as_text(record.message.content)
            if text:
                chunks.append(text)
                total_chars += len(text)

    metadata.search_content = " ".join(chunks).lower()
    metadata.token_count = total_chars // CHARS_PER_TOKEN
    return metadata


def load_session_metadata(session: Session) -> Session:
    """Scan ``session.path`` and overwrite the session's derived fields."""
    session.apply_metadata(scan_session_metadata(session.path))
    return session


def iter_load_metadata(
    sessions: list[Session],
    only_missing: bool = True,
) -> Iterator[tuple[int, int, Optional[SessionReadError]]]:
    """Scan sessions one at a time, yielding ``(index, total, error)`` after each.

    Lets the caller report progress between files. Unreadable sessions are
    logged and reported through ``error``; the remaining ones are still scanned.
    """
    total = len(sessions)
    for index, session in enumerate(sessions):
        error: Optional[SessionReadError] = None
        if not (only_missing and session.is_scanned):
            try:
                load_session_metadata(session)
            except SessionReadError as exc:
                logger.warning("Skipping metadata for %s: %s", session.id, exc)
                error = exc
        yield index, total, error


def load_all_metadata(sessions: Iterable[Session], only_missing: bool = True) -> int:
    """Scan every session, returning the number that could not be read."""
    sessions = list(sessions)
    return sum(1 for _, _, error in iter_load_metadata(sessions, only_missing) if error is not None)


def load_session_messages(path: Path) -> list[DisplayMessage]:
    """Project a transcript into display-ready messages in file order."""
    messages: list[DisplayMessage] = []

    for record in iter_records(path):
        if isinstance(record, UserRecord):
            content = content_as_text(record.message.content)
            if content and not is_system_content(record.message.content):
                messages.append(
                    DisplayMessage(role=MessageRole.USER, timestamp=record.timestamp, content=content)
                )
        elif isinstance(record, AssistantRecord):
            content = content_as_text(record.message.content)
            if content:
                messages.append(
                    DisplayMessage(role=MessageRole.ASSISTANT, timestamp=record.timestamp, content=content)
                )
        elif isinstance(record, SystemRecord):
            if record.timestamp is not None:
                messages.append(
                    DisplayMessage(
                        role=MessageRole.SYSTEM,
                        timestamp=record.timestamp,
                        content=SYSTEM_PLACEHOLDER,
                    )
                )

    return messages
