"""Typed records for Claude Code JSONL transcripts.

Each transcript line is one JSON object tagged by its ``type`` field. Known
tags decode into the matching record model; any other tag decodes into
``UnknownRecord``. Lines that are blank, not JSON, or missing required fields
decode to ``None`` and are skipped by callers: transcripts are append-only and
routinely end in a partially written line.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
)

from ccsessionctl.errors import SessionReadError

logger = logging.getLogger("ccsessionctl.parsers")


class _RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── Content blocks ──────────────────────────────────────────────────

class TextBlock(_RecordModel):
    type: Literal["text"] = "text"
    text: str


class ToolUseBlock(_RecordModel):
    type: Literal["tool_use"] = "tool_use"
    name: str
    input: Optional[Any] = None


class ToolResultBlock(_RecordModel):
    type: Literal["tool_result"] = "tool_result"
    content: Any = None


class ThinkingBlock(_RecordModel):
    type: Literal["thinking"] = "thinking"
    thinking: str


class OtherBlock(_RecordModel):
    """Any block type we do not render (images, redacted thinking, ...)."""

    type: Any = None


_BLOCK_TAGS = {"text", "tool_use", "tool_result", "thinking"}


def _tag_of(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("type")
    return getattr(value, "type", None)


def _block_tag(value: Any) -> str | None:
    if not isinstance(value, (dict, BaseModel)):
        return None
    tag = _tag_of(value)
    return tag if tag in _BLOCK_TAGS else "other"


ContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ToolUseBlock, Tag("tool_use")],
        Annotated[ToolResultBlock, Tag("tool_result")],
        Annotated[ThinkingBlock, Tag("thinking")],
        Annotated[OtherBlock, Tag("other")],
    ],
    Discriminator(_block_tag),
]

MessageContent = Union[str, list[ContentBlock]]


class Message(_RecordModel):
    role: Optional[str] = None
    content: MessageContent
    model: Optional[str] = None


# ── Records ─────────────────────────────────────────────────────────

class SummaryRecord(_RecordModel):
    type: Literal["summary"] = "summary"
    summary: str
    leaf_uuid: Optional[str] = Field(default=None, alias="leafUuid")


class CustomTitleRecord(_RecordModel):
    type: Literal["custom-title"] = "custom-title"
    custom_title: str = Field(alias="customTitle")


class FileHistorySnapshotRecord(_RecordModel):
    type: Literal["file-history-snapshot"] = "file-history-snapshot"
    message_id: str = Field(alias="messageId")


class UserRecord(_RecordModel):
    type: Literal["user"] = "user"
    uuid: str
    timestamp: datetime
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Message
    cwd: Optional[str] = None
    git_branch: Optional[str] = Field(default=None, alias="gitBranch")
    is_meta: Optional[bool] = Field(default=None, alias="isMeta")


class AssistantRecord(_RecordModel):
    type: Literal["assistant"] = "assistant"
    uuid: str
    timestamp: datetime
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Message


class SystemRecord(_RecordModel):
    type: Literal["system"] = "system"
    uuid: Optional[str] = None
    timestamp: Optional[datetime] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class QueueOperationRecord(_RecordModel):
    type: Literal["queue-operation"] = "queue-operation"
    queue_operations: Optional[Any] = Field(default=None, alias="queueOperations")


class UnknownRecord(_RecordModel):
    """Any record whose ``type`` tag this version does not know about."""

    type: Any = None


_RECORD_TAGS = {
    "summary",
    "custom-title",
    "file-history-snapshot",
    "user",
    "assistant",
    "system",
    "queue-operation",
}


def _record_tag(value: Any) -> str | None:
    tag = _tag_of(value)
    if not isinstance(tag, str):
        return None
    return tag if tag in _RECORD_TAGS else "unknown"


LogRecord = Annotated[
    Union[
        Annotated[SummaryRecord, Tag("summary")],
        Annotated[CustomTitleRecord, Tag("custom-title")],
        Annotated[FileHistorySnapshotRecord, Tag("file-history-snapshot")],
        Annotated[UserRecord, Tag("user")],
        Annotated[AssistantRecord, Tag("assistant")],
        Annotated[SystemRecord, Tag("system")],
        Annotated[QueueOperationRecord, Tag("queue-operation")],
        Annotated[UnknownRecord, Tag("unknown")],
    ],
    Discriminator(_record_tag),
]

_RECORD_ADAPTER: TypeAdapter[Any] = TypeAdapter(LogRecord)


def decode_record(line: str) -> Optional[Any]:
    """Decode one transcript line, returning ``None`` when it should be skipped."""
    stripped = line.strip()
    if not stripped:
        return None
    try:
        raw = json.loads(stripped)
    except (ValueError, RecursionError):
        return None
    if not isinstance(raw, dict):
        return None
    try:
        return _RECORD_ADAPTER.validate_python(raw)
    except (ValidationError, RecursionError):
        return None


def iter_records(path: Path) -> Iterator[Any]:
    """Yield every decodable record of a transcript in file order.

    Raises ``SessionReadError`` when the file cannot be opened or read.
    """
    path = Path(path)
    skipped = 0
    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                record = decode_record(line)
                if record is None:
                    if line.strip():
                        skipped += 1
                    continue
                yield record
    except OSError as exc:
        raise SessionReadError(path, exc.strerror or str(exc)) from exc
    if skipped:
        logger.debug("Skipped %d undecodable line(s) in %s", skipped, path)
