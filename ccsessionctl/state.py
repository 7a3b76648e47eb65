"""In-memory view state for the session browser.

``ViewState`` owns the session collection and the filtered/sorted projection
the list view renders; ``PreviewSearchState`` owns the text buffer of an open
preview. Neither touches the filesystem: callers load data and hand it in.
Every mutating method re-establishes the invariants before returning: the
cursor addresses a row of ``filtered_indices`` (or is 0 when it is empty) and
``selected`` only holds indices that exist in ``sessions``.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ccsessionctl import config
from ccsessionctl.date_utils import age_in_days, utc_now
from ccsessionctl.models import Filter, Session, SortField
from ccsessionctl.scanner import get_project_names

DEFAULT_VISIBLE_HEIGHT = 20
ALL_PROJECTS_LABEL = "All"


class View(str, Enum):
    LIST = "list"
    PREVIEW = "preview"
    SEARCH = "search"
    HELP = "help"
    CONFIRM = "confirm"


class DialogKind(str, Enum):
    DELETE_SELECTED = "delete_selected"
    DELETE_OLDER_THAN = "delete_older_than"
    ARCHIVE_SELECTED = "archive_selected"
    EXPORT_SELECTED = "export_selected"


@dataclass(frozen=True)
class DialogAction:
    kind: DialogKind
    days: Optional[int] = None


def _name_key(session: Session) -> str:
    if session.summary is not None:
        return session.summary
    if session.first_message is not None:
        return session.first_message
    return ""


def _fallback_search_text(session: Session) -> str:
    return " ".join(
        [
            session.project,
            session.id,
            session.summary or "",
            session.first_message or "",
        ]
    ).lower()


class PreviewSearchState:
    """Scroll position and incremental search over materialized preview lines."""

    def __init__(self, lines: Optional[list[str]] = None) -> None:
        self.lines: list[str] = list(lines or [])
        self.scroll = 0
        self.query = ""
        self.active = False
        self.matches: list[int] = []
        self.match_index = 0

    @property
    def max_scroll(self) -> int:
        return max(len(self.lines) - 1, 0)

    def scroll_up(self, amount: int = 1) -> None:
        self.scroll = max(self.scroll - amount, 0)

    def scroll_down(self, amount: int = 1) -> None:
        self.scroll = min(self.scroll + amount, self.max_scroll)

    def scroll_top(self) -> None:
        self.scroll = 0

    def scroll_bottom(self) -> None:
        self.scroll = self.max_scroll

    def update_search(self, query: str) -> int:
        """Recompute matches for ``query`` and return how many lines matched.

        A non-empty result scrolls to the first match; an empty one leaves the
        scroll position where it was.
        """
        self.query = query
        self.matches = []
        self.match_index = 0
        if not query:
            return 0

        needle = query.lower()
        self.matches = [i for i, line in enumerate(self.lines) if needle in line.lower()]
        if self.matches:
            self.scroll = self.matches[0]
        return len(self.matches)

    def next_match(self) -> None:
        if not self.matches:
            return
        self.match_index = (self.match_index + 1) % len(self.matches)
        self.scroll = self.matches[self.match_index]

    def prev_match(self) -> None:
        if not self.matches:
            return
        self.match_index = (self.match_index - 1) % len(self.matches)
        self.scroll = self.matches[self.match_index]

    def clear(self) -> None:
        self.query = ""
        self.active = False
        self.matches = []
        self.match_index = 0

    @property
    def match_label(self) -> str:
        if not self.matches:
            return "0/0"
        return f"{self.match_index + 1}/{len(self.matches)}"


class ViewState:
    """Session collection plus its filter/sort projection, cursor and selection."""

    def __init__(
        self,
        sessions: Optional[list[Session]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.sessions: list[Session] = list(sessions or [])
        self.filtered_indices: list[int] = list(range(len(self.sessions)))
        self.cursor = 0
        self.scroll_offset = 0
        self.visible_height = DEFAULT_VISIBLE_HEIGHT
        self.selected: set[int] = set()
        self.filter = Filter()
        self.sort_field = SortField.DATE
        self.sort_reversed = False
        self.projects = get_project_names(self.sessions)
        self.project_filter_index = 0
        self.view = View.LIST
        self.preview: Optional[PreviewSearchState] = None
        self.dialog_message: Optional[str] = None
        self.dialog_action: Optional[DialogAction] = None
        self.status_message: Optional[str] = None
        self._clock = clock
        self.refresh_view()

    # ── accessors ───────────────────────────────────────────────────

    def current_session_index(self) -> Optional[int]:
        if 0 <= self.cursor < len(self.filtered_indices):
            return self.filtered_indices[self.cursor]
        return None

    def current_session(self) -> Optional[Session]:
        idx = self.current_session_index()
        return self.sessions[idx] if idx is not None else None

    def visible_sessions(self) -> list[tuple[int, Session]]:
        return [(idx, self.sessions[idx]) for idx in self.filtered_indices]

    def is_selected(self, idx: int) -> bool:
        return idx in self.selected

    def selected_sessions(self) -> list[Session]:
        return [self.sessions[idx] for idx in sorted(self.selected) if idx < len(self.sessions)]

    def target_indices(self) -> set[int]:
        """Indices a bulk action applies to: the selection, else the current row."""
        if self.selected:
            return set(self.selected)
        idx = self.current_session_index()
        return {idx} if idx is not None else set()

    def target_sessions(self) -> list[Session]:
        if self.selected:
            return self.selected_sessions()
        current = self.current_session()
        return [current] if current is not None else []

    def older_than_indices(self, days: int) -> set[int]:
        now = self._clock()
        return {
            idx
            for idx, session in enumerate(self.sessions)
            if age_in_days(session.modified, now) >= days
        }

    def current_project_filter(self) -> str:
        if self.project_filter_index == 0:
            return ALL_PROJECTS_LABEL
        return self.projects[self.project_filter_index - 1]

    @property
    def sort_label(self) -> str:
        arrow = "↑" if self.sort_reversed else "↓"
        return f"{self.sort_field.label} {arrow}"

    # ── filtering and sorting ───────────────────────────────────────

    def _clamp_cursor(self) -> None:
        if self.cursor >= len(self.filtered_indices):
            self.cursor = max(len(self.filtered_indices) - 1, 0)
        if self.cursor < 0:
            self.cursor = 0

    def _matches(self, session: Session, query: str, now: datetime) -> bool:
        if self.filter.project is not None and session.project != self.filter.project:
            return False
        if self.filter.age_days is not None and age_in_days(session.modified, now) < self.filter.age_days:
            return False
        if query:
            haystack = session.search_content
            if haystack is None:
                haystack = _fallback_search_text(session)
            if query not in haystack:
                return False
        return True

    def apply_filters(self) -> None:
        """Recompute ``filtered_indices`` from the active filter, in collection order."""
        now = self._clock()
        query = self.filter.query.lower()
        self.filtered_indices = [
            idx for idx, session in enumerate(self.sessions) if self._matches(session, query, now)
        ]
        self._clamp_cursor()
        self.scroll_offset = 0

    def apply_sort(self) -> None:
        """Reorder ``filtered_indices`` by the active sort field."""
        sessions = self.sessions
        field = self.sort_field
        if field is SortField.DATE:
            key, descending = (lambda idx: sessions[idx].modified), True
        elif field is SortField.SIZE:
            key, descending = (lambda idx: sessions[idx].size_bytes), True
        elif field is SortField.PROJECT:
            key, descending = (lambda idx: sessions[idx].project), False
        else:
            key, descending = (lambda idx: _name_key(sessions[idx])), False

        self.filtered_indices.sort(key=key, reverse=descending != self.sort_reversed)
        self._clamp_cursor()

    def refresh_view(self) -> None:
        self.apply_filters()
        self.apply_sort()

    def set_query(self, query: str) -> None:
        self.filter.query = query
        self.refresh_view()

    def set_age_filter(self, days: Optional[int]) -> None:
        self.filter.age_days = days
        self.refresh_view()

    def cycle_project_filter(self) -> None:
        self.project_filter_index = (self.project_filter_index + 1) % (len(self.projects) + 1)
        if self.project_filter_index == 0:
            self.filter.project = None
        else:
            self.filter.project = self.projects[self.project_filter_index - 1]
        self.refresh_view()

    def cycle_sort_field(self) -> None:
        self.sort_field = self.sort_field.next()
        self.apply_sort()
        self.set_status(f"Sort: {self.sort_label}")

    def toggle_sort_direction(self) -> None:
        self.sort_reversed = not self.sort_reversed
        self.apply_sort()
        self.set_status(f"Sort: {self.sort_label}")

    # ── cursor movement ─────────────────────────────────────────────

    def _adjust_scroll(self) -> None:
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        elif self.cursor >= self.scroll_offset + self.visible_height:
            self.scroll_offset = self.cursor - self.visible_height + 1

    def set_visible_height(self, height: int) -> None:
        self.visible_height = max(height, 1)
        self._adjust_scroll()

    def cursor_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self._adjust_scroll()

    def cursor_down(self) -> None:
        if self.cursor + 1 < len(self.filtered_indices):
            self.cursor += 1
            self._adjust_scroll()

    def cursor_top(self) -> None:
        self.cursor = 0
        self.scroll_offset = 0

    def cursor_bottom(self) -> None:
        if self.filtered_indices:
            self.cursor = len(self.filtered_indices) - 1
            self._adjust_scroll()

    def page_up(self, page_size: int = config.PAGE_SIZE) -> None:
        self.cursor = max(self.cursor - page_size, 0)
        self._adjust_scroll()

    def page_down(self, page_size: int = config.PAGE_SIZE) -> None:
        self.cursor = min(self.cursor + page_size, max(len(self.filtered_indices) - 1, 0))
        self._adjust_scroll()

    def move_cursor_to(self, row: int) -> None:
        self.cursor = row
        self._clamp_cursor()
        self._adjust_scroll()

    # ── selection ───────────────────────────────────────────────────

    def toggle_selection(self) -> None:
        idx = self.current_session_index()
        if idx is None:
            return
        if idx in self.selected:
            self.selected.discard(idx)
        else:
            self.selected.add(idx)

    def select_all(self) -> None:
        self.selected.update(self.filtered_indices)

    def clear_selection(self) -> None:
        self.selected.clear()

    # ── collection mutation ─────────────────────────────────────────

    def _sync_projects(self) -> None:
        current = self.filter.project
        self.projects = get_project_names(self.sessions)
        if current is not None and current in self.projects:
            self.project_filter_index = self.projects.index(current) + 1
        else:
            self.project_filter_index = 0
            self.filter.project = None

    def remove_sessions(self, indices: Iterable[int]) -> None:
        """Drop sessions by absolute index, e.g. after they were deleted on disk."""
        for idx in sorted(set(indices), reverse=True):
            if 0 <= idx < len(self.sessions):
                del self.sessions[idx]
        self.selected.clear()
        self._sync_projects()
        self.refresh_view()

    def replace_sessions(self, sessions: list[Session]) -> None:
        """Swap in a freshly scanned collection, keeping filter and sort settings."""
        self.sessions = list(sessions)
        self.selected.clear()
        self._sync_projects()
        self.refresh_view()

    # ── transient UI state ──────────────────────────────────────────

    def open_preview(self, lines: list[str]) -> PreviewSearchState:
        self.preview = PreviewSearchState(lines)
        self.view = View.PREVIEW
        return self.preview

    def close_preview(self) -> None:
        self.preview = None
        self.view = View.LIST

    def show_confirm(self, message: str, action: DialogAction) -> None:
        self.dialog_message = message
        self.dialog_action = action
        self.view = View.CONFIRM

    def clear_dialog(self) -> None:
        self.dialog_message = None
        self.dialog_action = None
        self.view = View.LIST

    def set_status(self, message: str) -> None:
        self.status_message = message

    def clear_status(self) -> None:
        self.status_message = None
