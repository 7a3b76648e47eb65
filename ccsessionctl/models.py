"""Pydantic models shared by the parsers, the view state and the UI."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

AGENT_SESSION_PREFIX = "agent-"


# ── Session-related models ──────────────────────────────────────────

class SessionMetadata(BaseModel):
    """Derived fields produced by one full scan of a transcript."""

    created: Optional[datetime] = None
    summary: Optional[str] = None
    custom_title: Optional[str] = None
    first_message: Optional[str] = None
    message_count: int = 0
    search_content: str = ""
    # Rough estimate (~4 characters per token), never an exact count.
    token_count: int = 0


class Session(BaseModel):
    """One transcript file plus the fields derived from scanning it."""

    id: str
    project: str
    project_raw: str
    path: Path
    size_bytes: int = 0
    modified: datetime
    created: Optional[datetime] = None
    summary: Optional[str] = None
    custom_title: Optional[str] = None
    first_message: Optional[str] = None
    message_count: Optional[int] = None
    search_content: Optional[str] = None
    token_count: Optional[int] = None
    is_agent: bool = False
    has_directory: bool = False

    @classmethod
    def new(
        cls,
        id: str,
        project: str,
        project_raw: str,
        path: Path,
        size_bytes: int,
        modified: datetime,
    ) -> Session:
        path = Path(path)
        return cls(
            id=id,
            project=project,
            project_raw=project_raw,
            path=path,
            size_bytes=size_bytes,
            modified=modified,
            is_agent=id.startswith(AGENT_SESSION_PREFIX),
            has_directory=path.with_suffix("").is_dir(),
        )

    @property
    def directory(self) -> Path:
        """Sibling directory holding auxiliary files (may not exist)."""
        return self.path.with_suffix("")

    @property
    def is_scanned(self) -> bool:
        return self.message_count is not None

    def apply_metadata(self, metadata: SessionMetadata) -> None:
        """Overwrite every derived field with the result of a scan."""
        self.created = metadata.created
        self.summary = metadata.summary
        self.custom_title = metadata.custom_title
        self.first_message = metadata.first_message
        self.message_count = metadata.message_count
        self.search_content = metadata.search_content
        self.token_count = metadata.token_count


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class DisplayMessage(BaseModel):
    role: MessageRole
    timestamp: datetime
    content: str = ""


# ── View-related models ─────────────────────────────────────────────

class SortField(str, Enum):
    DATE = "date"
    SIZE = "size"
    PROJECT = "project"
    NAME = "name"

    def next(self) -> SortField:
        members = list(SortField)
        return members[(members.index(self) + 1) % len(members)]

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Filter(BaseModel):
    query: str = ""
    project: Optional[str] = None
    age_days: Optional[int] = None


class ProjectStats(BaseModel):
    project: str
    sessions: int = 0
    size_bytes: int = 0
    tokens: int = 0
