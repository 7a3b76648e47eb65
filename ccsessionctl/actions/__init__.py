"""Bulk actions on sessions: delete, Markdown export, tar.gz archive."""

from ccsessionctl.actions.archive import (
    archive_each,
    archive_session,
    archive_sessions,
    default_archive_dir,
)
from ccsessionctl.actions.delete import can_delete, delete_session, delete_sessions
from ccsessionctl.actions.export import (
    default_export_dir,
    export_session_markdown,
    export_session_to_string,
    export_sessions_markdown,
)

__all__ = [
    "archive_each",
    "archive_session",
    "archive_sessions",
    "default_archive_dir",
    "can_delete",
    "delete_session",
    "delete_sessions",
    "default_export_dir",
    "export_session_markdown",
    "export_session_to_string",
    "export_sessions_markdown",
]
