"""Textual session browser: list, search, preview and bulk actions."""
from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.message import Message
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Input, Label, Static

from ccsessionctl import config
from ccsessionctl.actions import (
    archive_each,
    can_delete,
    default_archive_dir,
    default_export_dir,
    delete_session,
    export_sessions_markdown,
)
from ccsessionctl.clipboard import copy_to_clipboard, resume_command
from ccsessionctl.date_utils import format_utc
from ccsessionctl.errors import ActionError, SessionReadError
from ccsessionctl.highlight import CodeBlock, CodeHighlighter, block_for_line, parse_code_blocks
from ccsessionctl.models import Session, SortField
from ccsessionctl.parsers.sessions import iter_load_metadata, load_session_messages
from ccsessionctl.preview import (
    EMPTY_LABEL,
    build_preview_lines,
    format_size,
    format_tokens,
    get_session_preview,
)
from ccsessionctl.scanner import decode_project_path, scan_sessions
from ccsessionctl.state import DialogAction, DialogKind, PreviewSearchState, View, ViewState

logger = logging.getLogger("ccsessionctl.tui")

TITLE = "ccsessionctl - Claude Code Session Manager"
SELECTED_MARKER = "●"
DEFAULT_PANE_HEIGHT = 20

_HEADER_RE = re.compile(r"^\[(User|Assistant|System)\] ")
_ROLE_STYLES = {
    "User": "bold green",
    "Assistant": "bold cyan",
    "System": "bold magenta",
}
_MATCH_STYLE = "black on yellow"

HELP_TEXT = """\
List
  j / k, Up / Down     move cursor
  g / G, Home / End    first / last session
  PgUp / PgDn          page
  Enter                preview session
  Space                toggle selection
  a / A                select all / clear selection
  /                    filter sessions (Esc clears)
  p                    cycle project filter
  t                    toggle age filter
  s / o                cycle sort field / reverse order
  d                    delete selected or current
  D                    delete sessions older than {days} days
  e                    export to Markdown
  z                    archive to tar.gz
  r                    rescan sessions
  y / Y                copy resume command / file path
  q                    quit

Preview
  j / k, g / G         scroll
  PgUp / PgDn          page
  /                    search in session
  n / N                next / previous match
  q / Esc              back to list
"""

# Actions that touch the collection on disk are held back until metadata is loaded.
_MUTATING_ACTIONS = frozenset({"delete", "delete_older", "export", "archive", "refresh"})
# List bindings stay inert while a preview, dialog or help overlay is on top.
_LIST_ACTIONS = _MUTATING_ACTIONS | {
    "search",
    "clear_search",
    "toggle_select",
    "select_all",
    "clear_selection",
    "cycle_project",
    "toggle_age_filter",
    "cycle_sort",
    "toggle_order",
    "copy_resume",
    "copy_path",
    "help",
}

_NAVIGATION_STEPS = {
    "cursor_down": ViewState.cursor_down,
    "cursor_up": ViewState.cursor_up,
    "cursor_top": ViewState.cursor_top,
    "cursor_bottom": ViewState.cursor_bottom,
    "page_up": ViewState.page_up,
    "page_down": ViewState.page_down,
}


def render_preview(
    preview: PreviewSearchState,
    blocks: list[CodeBlock],
    height: int,
    highlighter: Optional[CodeHighlighter] = None,
) -> Text:
    """Render the visible window of a preview buffer as rich Text."""
    if not preview.lines:
        return Text(EMPTY_LABEL, style="dim")

    end = min(preview.scroll + max(height, 1), len(preview.lines))
    current = preview.matches[preview.match_index] if preview.matches else None
    rendered: list[Text] = []

    for idx in range(preview.scroll, end):
        line = preview.lines[idx]
        block = block_for_line(blocks, idx)
        header = _HEADER_RE.match(line)
        if block is not None:
            if highlighter is not None:
                text = highlighter.highlight_line(line, block.language)
            else:
                text = Text(line)
        elif line.startswith("```"):
            text = Text(line, style="dim")
        elif header is not None:
            text = Text(line, style=_ROLE_STYLES[header.group(1)])
        else:
            text = Text(line)

        if preview.query:
            text.highlight_words([preview.query], _MATCH_STYLE, case_sensitive=False)
            if idx == current:
                text.stylize("reverse")
        rendered.append(text)

    return Text("\n").join(rendered)


class SessionTable(DataTable):
    """Session list.

    Cursor keys are forwarded to the app as ``Navigate`` messages so the
    ``ViewState`` cursor stays authoritative; the app moves the table cursor
    back to match. The table only owns its scroll position, which follows the
    cursor.
    """

    BINDINGS = [
        Binding("j,down", "navigate('cursor_down')", "Down", show=False),
        Binding("k,up", "navigate('cursor_up')", "Up", show=False),
        Binding("g,home", "navigate('cursor_top')", "Top", show=False),
        Binding("G,end", "navigate('cursor_bottom')", "Bottom", show=False),
        Binding("pageup", "navigate('page_up')", "Page up", show=False),
        Binding("pagedown", "navigate('page_down')", "Page down", show=False),
    ]

    class Navigate(Message):
        def __init__(self, step: str) -> None:
            super().__init__()
            self.step = step

    def action_navigate(self, step: str) -> None:
        self.post_message(self.Navigate(step))


class PreviewPane(Static):
    """Scrollable window over the preview buffer."""

    can_focus = True


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog for destructive actions."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        border: thick $warning;
        background: $surface;
        padding: 1 2;
    }

    #confirm-buttons {
        margin-top: 1;
        height: 3;
        align: center middle;
    }

    #confirm-buttons Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("y,enter", "confirm", "Yes"),
        Binding("n,escape", "cancel", "No"),
        Binding("q", "cancel", "No", show=False),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(Text(self.message), id="confirm-message")
            yield Label(Text("(y/n)", style="dim"))
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", variant="error", id="confirm-yes")
                yield Button("No", variant="default", id="confirm-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class HelpScreen(ModalScreen[None]):
    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-dialog {
        width: 64;
        height: auto;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("q,escape,question_mark", "close", "Close"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="help-dialog"):
            yield Static(Text(HELP_TEXT.format(days=config.DEFAULT_AGE_DAYS)), id="help-text")

    def action_close(self) -> None:
        self.dismiss(None)


class PreviewScreen(Screen[None]):
    """Full-screen transcript view with incremental search."""

    CSS = """
    #preview-title {
        height: 1;
        background: $accent;
        color: $text;
        padding: 0 1;
    }

    #preview-search {
        display: none;
        height: 3;
    }

    #preview-search.visible {
        display: block;
    }

    #preview-pane {
        height: 1fr;
        padding: 0 1;
    }

    #preview-status {
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q,escape", "close", "Back"),
        Binding("j,down", "scroll_down", "Down", show=False),
        Binding("k,up", "scroll_up", "Up", show=False),
        Binding("g,home", "scroll_top", "Top", show=False),
        Binding("G,end", "scroll_bottom", "Bottom", show=False),
        Binding("pagedown", "page_down", "Page down", show=False),
        Binding("pageup", "page_up", "Page up", show=False),
        Binding("slash", "search", "Find", key_display="/"),
        Binding("n", "next_match", "Next"),
        Binding("N", "prev_match", "Prev", key_display="N"),
    ]

    def __init__(
        self,
        session: Session,
        preview: PreviewSearchState,
        highlighter: Optional[CodeHighlighter] = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.preview = preview
        self.highlighter = highlighter
        self.blocks = parse_code_blocks(preview.lines)

    def compose(self) -> ComposeResult:
        yield Static(
            Text(f"{self.session.project} / {self.session.id}  {format_utc(self.session.modified)}"),
            id="preview-title",
        )
        yield Input(placeholder="Search in session...", id="preview-search")
        yield PreviewPane(id="preview-pane")
        yield Static("", id="preview-status")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#preview-pane", PreviewPane).focus()
        self.call_after_refresh(self.refresh_preview)

    def on_resize(self) -> None:
        self.refresh_preview()

    def _pane_height(self) -> int:
        height = self.query_one("#preview-pane", PreviewPane).size.height
        return height if height > 0 else DEFAULT_PANE_HEIGHT

    def refresh_preview(self) -> None:
        pane = self.query_one("#preview-pane", PreviewPane)
        pane.update(render_preview(self.preview, self.blocks, self._pane_height(), self.highlighter))

        total = len(self.preview.lines)
        status = f"line {min(self.preview.scroll + 1, total)}/{total}"
        if self.preview.query:
            status += f"  search: {self.preview.query} ({self.preview.match_label})"
        self.query_one("#preview-status", Static).update(Text(status))

    def _search_input(self) -> Input:
        return self.query_one("#preview-search", Input)

    def _hide_search(self) -> None:
        self.preview.active = False
        self._search_input().remove_class("visible")
        self.query_one("#preview-pane", PreviewPane).focus()

    def action_close(self) -> None:
        search = self._search_input()
        if search.has_focus:
            # Esc inside the search box only abandons the search.
            self.preview.clear()
            search.value = ""
            self._hide_search()
            self.refresh_preview()
            return
        self.dismiss(None)

    def action_scroll_down(self) -> None:
        self.preview.scroll_down()
        self.refresh_preview()

    def action_scroll_up(self) -> None:
        self.preview.scroll_up()
        self.refresh_preview()

    def action_scroll_top(self) -> None:
        self.preview.scroll_top()
        self.refresh_preview()

    def action_scroll_bottom(self) -> None:
        self.preview.scroll_bottom()
        self.refresh_preview()

    def action_page_down(self) -> None:
        self.preview.scroll_down(config.PAGE_SIZE)
        self.refresh_preview()

    def action_page_up(self) -> None:
        self.preview.scroll_up(config.PAGE_SIZE)
        self.refresh_preview()

    def action_search(self) -> None:
        self.preview.active = True
        search = self._search_input()
        search.add_class("visible")
        search.focus()

    def action_next_match(self) -> None:
        self.preview.next_match()
        self.refresh_preview()

    def action_prev_match(self) -> None:
        self.preview.prev_match()
        self.refresh_preview()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "preview-search":
            return
        self.preview.update_search(event.value)
        self.refresh_preview()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "preview-search":
            return
        self._hide_search()
        self.refresh_preview()


class SessionBrowserApp(App):
    """Interactive browser over a scanned session collection."""

    CSS = """
    #title {
        height: 1;
        color: $accent;
        text-style: bold;
        padding: 0 1;
    }

    #filter-bar {
        height: 1;
        padding: 0 1;
    }

    #search-input {
        display: none;
        height: 3;
    }

    #search-input.visible {
        display: block;
    }

    #sessions {
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "search", "Filter", key_display="/"),
        Binding("escape", "clear_search", "Clear", show=False),
        Binding("space", "toggle_select", "Select"),
        Binding("a", "select_all", "All", show=False),
        Binding("A", "clear_selection", "None", show=False),
        Binding("p", "cycle_project", "Project"),
        Binding("t", "toggle_age_filter", "Age", show=False),
        Binding("s", "cycle_sort", "Sort"),
        Binding("o", "toggle_order", "Order", show=False),
        Binding("d", "delete", "Delete"),
        Binding("D", "delete_older", "Delete old", key_display="D", show=False),
        Binding("e", "export", "Export"),
        Binding("z", "archive", "Archive"),
        Binding("r", "refresh", "Refresh"),
        Binding("y", "copy_resume", "Copy resume", show=False),
        Binding("Y", "copy_path", "Copy path", key_display="Y", show=False),
        Binding("question_mark", "help", "Help", key_display="?"),
    ]

    def __init__(
        self,
        sessions: list[Session],
        projects_dir: Optional[Path] = None,
        sort_field: SortField = SortField.DATE,
        sort_reversed: bool = False,
        highlighter: Optional[CodeHighlighter] = None,
        load_metadata: bool = True,
    ) -> None:
        super().__init__()
        self.state = ViewState(sessions)
        self.state.sort_field = sort_field
        self.state.sort_reversed = sort_reversed
        self.state.apply_sort()
        self.projects_dir = projects_dir
        if highlighter is None and config.HIGHLIGHT_CODE:
            highlighter = CodeHighlighter()
        self.highlighter = highlighter
        self._load_on_mount = load_metadata
        self._loading = False

    def compose(self) -> ComposeResult:
        yield Static(TITLE, id="title")
        yield Static("", id="filter-bar")
        yield Input(placeholder="Filter sessions...", id="search-input")
        yield SessionTable(id="sessions", cursor_type="row", zebra_stripes=True)
        yield Static("", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        table = self._table()
        table.add_column("", key="sel", width=1)
        table.add_column("Project", key="project")
        table.add_column("Date", key="date")
        table.add_column("Size", key="size")
        table.add_column("Tokens", key="tokens")
        table.add_column("Preview", key="preview")
        self._refresh_table()
        table.focus()
        if self._load_on_mount and self.state.sessions:
            self._start_metadata_load("Loaded")

    def on_resize(self) -> None:
        try:
            height = self._table().size.height
        except NoMatches:
            return
        if height > 1:
            # One row of the table is its header.
            self.state.set_visible_height(height - 1)

    # ── rendering ───────────────────────────────────────────────────

    def _table(self) -> SessionTable:
        return self.query_one("#sessions", SessionTable)

    def _row_cells(self, idx: int, session: Session) -> list[Text]:
        selected = self.state.is_selected(idx)
        style = "yellow" if selected else ""
        tokens = format_tokens(session.token_count) if session.token_count is not None else "-"
        values = [
            SELECTED_MARKER if selected else " ",
            session.project,
            format_utc(session.modified, "%b %d"),
            format_size(session.size_bytes),
            tokens,
            get_session_preview(session),
        ]
        return [Text(value, style=style) for value in values]

    def _refresh_table(self) -> None:
        table = self._table()
        table.clear()
        for idx, session in self.state.visible_sessions():
            table.add_row(*self._row_cells(idx, session), key=str(idx))
        if table.row_count:
            table.move_cursor(row=self.state.cursor)
        self._refresh_bars()

    def _refresh_row(self, idx: int) -> None:
        table = self._table()
        cells = self._row_cells(idx, self.state.sessions[idx])
        for column_key, value in zip(("sel", "project", "date", "size", "tokens", "preview"), cells):
            table.update_cell(str(idx), column_key, value)

    def _refresh_bars(self) -> None:
        state = self.state
        query = state.filter.query
        parts = [
            f"Filter: [{query}]" if query else "Filter: [/]",
            f"Project: [{state.current_project_filter()}]",
            f"Sort: [{state.sort_label}]",
        ]
        if state.filter.age_days is not None:
            parts.append(f"Age: [>= {state.filter.age_days}d]")
        if state.selected:
            parts.append(f"Selected: {len(state.selected)}")
        parts.append(f"({len(state.filtered_indices)}/{len(state.sessions)})")
        self.query_one("#filter-bar", Static).update(Text("  ".join(parts)))
        self.query_one("#status-bar", Static).update(Text(state.status_message or ""))

    def _set_status(self, message: str) -> None:
        self.state.set_status(message)
        self._refresh_bars()

    # ── metadata loading ────────────────────────────────────────────

    def _start_metadata_load(self, verb: str) -> None:
        self._loading = True
        self.run_worker(self._load_metadata(verb), exclusive=True, group="metadata")

    async def _load_metadata(self, verb: str) -> None:
        interval = max(config.PROGRESS_INTERVAL, 1)
        failed = 0
        try:
            for index, total, error in iter_load_metadata(self.state.sessions):
                if error is not None:
                    failed += 1
                if index % interval == 0 or index == total - 1:
                    self._set_status(f"Loading session metadata... {index + 1}/{total}")
                    await asyncio.sleep(0)
        finally:
            self._loading = False

        self.state.refresh_view()
        self._refresh_table()
        message = f"{verb} {len(self.state.sessions)} session(s)"
        if failed:
            message += f", {failed} unreadable"
        self._set_status(message)

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if self.state.view not in (View.LIST, View.SEARCH) and action in _LIST_ACTIONS:
            return False
        if self._loading and action in _MUTATING_ACTIONS:
            return False
        return True

    # ── table events ────────────────────────────────────────────────

    def on_session_table_navigate(self, message: SessionTable.Navigate) -> None:
        step = _NAVIGATION_STEPS.get(message.step)
        if step is None:
            return
        step(self.state)
        table = self._table()
        if table.row_count:
            table.move_cursor(row=self.state.cursor)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self.state.move_cursor_to(event.cursor_row)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.state.move_cursor_to(event.cursor_row)
        self.open_preview()

    # ── list actions ────────────────────────────────────────────────

    def action_toggle_select(self) -> None:
        idx = self.state.current_session_index()
        if idx is None:
            return
        self.state.toggle_selection()
        self._refresh_row(idx)
        self._refresh_bars()
        self._table().action_cursor_down()

    def action_select_all(self) -> None:
        self.state.select_all()
        self._refresh_table()

    def action_clear_selection(self) -> None:
        self.state.clear_selection()
        self._refresh_table()

    def action_search(self) -> None:
        self.state.view = View.SEARCH
        search = self.query_one("#search-input", Input)
        search.value = self.state.filter.query
        search.add_class("visible")
        search.focus()

    def _close_search(self) -> None:
        self.state.view = View.LIST
        self.query_one("#search-input", Input).remove_class("visible")
        self._table().focus()

    def action_clear_search(self) -> None:
        search = self.query_one("#search-input", Input)
        if self.state.view is not View.SEARCH and not self.state.filter.query:
            return
        search.value = ""
        self.state.set_query("")
        self._close_search()
        self._refresh_table()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search-input" or self.state.view is not View.SEARCH:
            return
        self.state.set_query(event.value)
        self._refresh_table()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search-input":
            return
        self._close_search()

    def action_cycle_project(self) -> None:
        self.state.cycle_project_filter()
        self._refresh_table()

    def action_toggle_age_filter(self) -> None:
        if self.state.filter.age_days is None:
            self.state.set_age_filter(config.DEFAULT_AGE_DAYS)
            self.state.set_status(f"Showing sessions older than {config.DEFAULT_AGE_DAYS} days")
        else:
            self.state.set_age_filter(None)
            self.state.set_status("Age filter cleared")
        self._refresh_table()

    def action_cycle_sort(self) -> None:
        self.state.cycle_sort_field()
        self._refresh_table()

    def action_toggle_order(self) -> None:
        self.state.toggle_sort_direction()
        self._refresh_table()

    def action_help(self) -> None:
        self.state.view = View.HELP
        self.push_screen(HelpScreen(), self._on_help_closed)

    def _on_help_closed(self, _result: None = None) -> None:
        self.state.view = View.LIST

    # ── preview ─────────────────────────────────────────────────────

    def open_preview(self) -> None:
        session = self.state.current_session()
        if session is None:
            return
        try:
            messages = load_session_messages(session.path)
        except SessionReadError as exc:
            self._set_status(f"Failed to load: {exc}")
            return
        preview = self.state.open_preview(build_preview_lines(messages))
        self.push_screen(PreviewScreen(session, preview, self.highlighter), self._on_preview_closed)

    def _on_preview_closed(self, _result: None = None) -> None:
        self.state.close_preview()
        self._table().focus()

    # ── bulk actions ────────────────────────────────────────────────

    def _confirm(self, message: str, action: DialogAction) -> None:
        self.state.show_confirm(message, action)
        self.push_screen(ConfirmScreen(message), self._on_confirm)

    def _on_confirm(self, confirmed: Optional[bool]) -> None:
        action = self.state.dialog_action
        self.state.clear_dialog()
        if confirmed and action is not None:
            self.execute(action)
        else:
            self._refresh_bars()

    def action_delete(self) -> None:
        count = len(self.state.target_indices())
        if not count:
            self._set_status("No sessions to delete")
            return
        message = "Delete this session?" if count == 1 else f"Delete {count} sessions?"
        self._confirm(message, DialogAction(DialogKind.DELETE_SELECTED))

    def action_delete_older(self) -> None:
        days = config.DEFAULT_AGE_DAYS
        count = len(self.state.older_than_indices(days))
        if not count:
            self._set_status(f"No sessions older than {days} days")
            return
        self._confirm(
            f"Delete {count} session(s) older than {days} days?",
            DialogAction(DialogKind.DELETE_OLDER_THAN, days=days),
        )

    def action_export(self) -> None:
        self.execute(DialogAction(DialogKind.EXPORT_SELECTED))

    def action_archive(self) -> None:
        self.execute(DialogAction(DialogKind.ARCHIVE_SELECTED))

    def execute(self, action: DialogAction) -> None:
        """Run a bulk action against the current targets and report the outcome."""
        if action.kind is DialogKind.DELETE_SELECTED:
            deleted, failed = self._delete_indices(self.state.target_indices())
            message = f"Deleted {deleted} session(s)"
        elif action.kind is DialogKind.DELETE_OLDER_THAN:
            days = action.days if action.days is not None else config.DEFAULT_AGE_DAYS
            deleted, failed = self._delete_indices(self.state.older_than_indices(days))
            message = f"Deleted {deleted} session(s) older than {days} days"
        elif action.kind is DialogKind.EXPORT_SELECTED:
            self._export()
            return
        else:
            self._archive()
            return

        if failed:
            message += f", {failed} failed"
        self._set_status(message)

    def _delete_indices(self, indices: set[int]) -> tuple[int, int]:
        deleted: list[int] = []
        failed = 0
        for idx in sorted(indices):
            session = self.state.sessions[idx]
            if not can_delete(session.path):
                logger.warning("Cannot delete %s: %s is missing or read-only", session.id, session.path)
                failed += 1
                continue
            try:
                delete_session(session)
            except ActionError as exc:
                logger.warning("%s", exc)
                failed += 1
                continue
            deleted.append(idx)
        self.state.remove_sessions(deleted)
        self._refresh_table()
        logger.info("Deleted %d session(s), %d failed", len(deleted), failed)
        return len(deleted), failed

    def _export(self) -> None:
        sessions = self.state.target_sessions()
        if not sessions:
            self._set_status("No sessions to export")
            return
        try:
            export_dir = default_export_dir()
        except OSError as exc:
            self._set_status(f"Export failed: {exc}")
            return
        paths = export_sessions_markdown(sessions, export_dir)
        self._set_status(f"Exported {len(paths)} session(s) to {export_dir}")

    def _archive(self) -> None:
        sessions = self.state.target_sessions()
        if not sessions:
            self._set_status("No sessions to archive")
            return
        try:
            archive_dir = default_archive_dir()
        except OSError as exc:
            self._set_status(f"Archive failed: {exc}")
            return
        paths = archive_each(sessions, archive_dir)
        self._set_status(f"Archived {len(paths)} session(s) to {archive_dir}")

    def action_refresh(self) -> None:
        try:
            sessions = scan_sessions(self.projects_dir)
        except OSError as exc:
            self._set_status(f"Refresh failed: {exc}")
            return
        self.state.replace_sessions(sessions)
        self._refresh_table()
        self._start_metadata_load("Refreshed")

    # ── clipboard ───────────────────────────────────────────────────

    def _copy(self, text: str, label: str) -> None:
        if copy_to_clipboard(text):
            self._set_status(f"{label}: {text}")
            return
        # OSC 52 through the terminal; delivery cannot be confirmed.
        self.copy_to_clipboard(text)
        self._set_status(f"{label} (terminal clipboard): {text}")

    def action_copy_resume(self) -> None:
        session = self.state.current_session()
        if session is None:
            return
        self._copy(resume_command(decode_project_path(session.project_raw), session.id), "Copied")

    def action_copy_path(self) -> None:
        session = self.state.current_session()
        if session is None:
            return
        self._copy(str(session.path), "Copied path")
