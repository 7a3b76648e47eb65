"""ccsessionctl configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return Path(value.strip()).expanduser()


HOME_DIR = Path.home()

# Claude Code keeps one directory per project under ~/.claude/projects/
PROJECTS_DIR = _env_path("CCSESSIONCTL_PROJECTS_DIR", HOME_DIR / ".claude" / "projects")

# Bulk action output
EXPORT_DIR = _env_path("CCSESSIONCTL_EXPORT_DIR", HOME_DIR / "claude-sessions-export")
ARCHIVE_DIR = _env_path("CCSESSIONCTL_ARCHIVE_DIR", HOME_DIR / "claude-sessions-archive")

# Threshold for "delete older than N days"; also the default age filter
DEFAULT_AGE_DAYS = _env_int("CCSESSIONCTL_DEFAULT_AGE_DAYS", 30)

# Interactive UI tuning
PAGE_SIZE = _env_int("CCSESSIONCTL_PAGE_SIZE", 20)
PROGRESS_INTERVAL = _env_int("CCSESSIONCTL_PROGRESS_INTERVAL", 50)
HIGHLIGHT_CODE = _env_bool("CCSESSIONCTL_HIGHLIGHT_CODE", True)

# Logging
LOG_LEVEL = os.getenv("CCSESSIONCTL_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
LOG_FILE = os.getenv("CCSESSIONCTL_LOG_FILE", "").strip()
