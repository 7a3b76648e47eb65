"""Shared timestamp normalization helpers."""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Optional


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def modified_from_stat(stats: os.stat_result) -> datetime:
    return datetime.fromtimestamp(float(stats.st_mtime), timezone.utc)


def age_in_days(value: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``value``, truncated toward zero."""
    reference = ensure_utc(now) if now is not None else utc_now()
    delta = reference - ensure_utc(value)
    seconds = delta.total_seconds()
    days = int(abs(seconds) // 86400)
    return days if seconds >= 0 else -days


def format_utc(value: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    if value is None:
        return ""
    return ensure_utc(value).strftime(fmt)
