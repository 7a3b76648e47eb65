"""Transcript parsing: record decoding, text extraction and session scans."""

from ccsessionctl.parsers.content import (
    content_as_text,
    extract_block_text,
    is_system_content,
    truncate,
    truncate_message,
)
from ccsessionctl.parsers.records import decode_record, iter_records
from ccsessionctl.parsers.sessions import (
    iter_load_metadata,
    load_all_metadata,
    load_session_messages,
    load_session_metadata,
    scan_session_metadata,
)

__all__ = [
    "content_as_text",
    "extract_block_text",
    "is_system_content",
    "truncate",
    "truncate_message",
    "decode_record",
    "iter_records",
    "iter_load_metadata",
    "load_all_metadata",
    "load_session_messages",
    "load_session_metadata",
    "scan_session_metadata",
]
