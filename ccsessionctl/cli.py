#!/usr/bin/env python3
"""ccsessionctl: manage Claude Code CLI session transcripts.

Usage:
  ccsessionctl                         # interactive browser
  ccsessionctl --list --sort size      # tab-separated listing
  ccsessionctl --stats
  ccsessionctl --prune-empty --dry-run
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from ccsessionctl import __version__, config
from ccsessionctl.actions import delete_session
from ccsessionctl.date_utils import format_utc
from ccsessionctl.errors import ActionError
from ccsessionctl.models import ProjectStats, Session, SortField
from ccsessionctl.parsers.sessions import load_all_metadata
from ccsessionctl.preview import format_size, format_tokens, get_session_preview, is_empty_session
from ccsessionctl.scanner import scan_sessions
from ccsessionctl.state import ViewState

logger = logging.getLogger("ccsessionctl")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False, interactive: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    if config.LOG_FILE:
        logging.basicConfig(level=level, format=_LOG_FORMAT, filename=config.LOG_FILE)
    elif interactive:
        from textual.logging import TextualHandler

        logging.basicConfig(level=level, format=_LOG_FORMAT, handlers=[TextualHandler()])
    else:
        logging.basicConfig(level=level, format=_LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccsessionctl",
        description="TUI for managing Claude Code CLI sessions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--list", action="store_true", help="List sessions without the TUI")
    parser.add_argument("--count", action="store_true", help="Show session count only")
    parser.add_argument("--stats", action="store_true", help="Show usage statistics by project")
    parser.add_argument(
        "--prune-empty",
        action="store_true",
        help="Delete all sessions without a title, message or summary",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview what would be deleted (use with --prune-empty)",
    )
    parser.add_argument(
        "-s",
        "--sort",
        choices=[field.value for field in SortField],
        default=SortField.DATE.value,
        help="Sort by field (default: date)",
    )
    parser.add_argument("-r", "--reverse", action="store_true", help="Reverse sort order")
    parser.add_argument(
        "-p",
        "--project",
        help="Filter by project name (case-insensitive substring match)",
    )
    parser.add_argument(
        "--projects-dir",
        type=Path,
        default=None,
        help=f"Claude projects directory (default: {config.PROJECTS_DIR})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _write_line(out: TextIO, line: str) -> bool:
    try:
        out.write(line + "\n")
    except BrokenPipeError:
        return False
    return True


def _ordered_sessions(sessions: list[Session], sort: SortField, reverse: bool) -> list[Session]:
    state = ViewState(sessions)
    state.sort_field = sort
    state.sort_reversed = reverse
    state.apply_sort()
    return [session for _, session in state.visible_sessions()]


def print_list(sessions: list[Session], out: TextIO) -> None:
    for session in sessions:
        line = "\t".join(
            [
                session.project,
                session.id,
                format_utc(session.modified, "%Y-%m-%d %H:%M"),
                format_size(session.size_bytes),
                get_session_preview(session),
            ]
        )
        if not _write_line(out, line):
            break


def collect_project_stats(sessions: list[Session]) -> list[ProjectStats]:
    """Per-project totals, largest on disk first."""
    stats: dict[str, ProjectStats] = {}
    for session in sessions:
        entry = stats.setdefault(session.project, ProjectStats(project=session.project))
        entry.sessions += 1
        entry.size_bytes += session.size_bytes
        entry.tokens += session.token_count or 0
    return sorted(stats.values(), key=lambda entry: entry.size_bytes, reverse=True)


def print_stats(sessions: list[Session], out: TextIO) -> None:
    rows = collect_project_stats(sessions)
    header = f"{'Project':<20} {'Sessions':>8} {'Size':>12} {'Tokens':>12}"
    out.write(header + "\n")
    out.write("-" * 56 + "\n")
    for row in rows:
        name = row.project if len(row.project) <= 20 else row.project[:17] + "..."
        out.write(
            f"{name:<20} {row.sessions:>8} {format_size(row.size_bytes):>12} "
            f"{format_tokens(row.tokens):>12}\n"
        )
    out.write("-" * 56 + "\n")
    total = ProjectStats(
        project="TOTAL",
        sessions=sum(row.sessions for row in rows),
        size_bytes=sum(row.size_bytes for row in rows),
        tokens=sum(row.tokens for row in rows),
    )
    out.write(
        f"{total.project:<20} {total.sessions:>8} {format_size(total.size_bytes):>12} "
        f"{format_tokens(total.tokens):>12}\n"
    )


def prune_empty(sessions: list[Session], dry_run: bool, out: TextIO) -> int:
    """Delete scanned sessions that carry no content; returns the delete count."""
    empty = [session for session in sessions if is_empty_session(session)]
    if not empty:
        out.write("No empty sessions found.\n")
        return 0

    if dry_run:
        out.write(f"Would delete {len(empty)} empty session(s):\n")
        for session in empty:
            out.write(f"  {session.project} / {session.id} ({format_size(session.size_bytes)})\n")
        return 0

    out.write(f"Deleting {len(empty)} empty session(s)...\n")
    deleted = 0
    freed = 0
    for session in empty:
        try:
            delete_session(session)
        except ActionError as exc:
            logger.warning("%s", exc)
            continue
        deleted += 1
        freed += session.size_bytes
    out.write(f"Deleted {deleted} session(s), freed {format_size(freed)}\n")
    return deleted


def run_tui(
    sessions: list[Session],
    projects_dir: Optional[Path],
    sort: SortField = SortField.DATE,
    reverse: bool = False,
) -> int:
    from ccsessionctl.tui import SessionBrowserApp

    app = SessionBrowserApp(sessions, projects_dir=projects_dir, sort_field=sort, sort_reversed=reverse)
    app.run()
    return 0


def main(argv: Optional[list[str]] = None, out: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout
    interactive = not (args.list or args.count or args.stats or args.prune_empty)
    configure_logging(verbose=args.verbose, interactive=interactive)

    sessions = scan_sessions(args.projects_dir)
    if args.project:
        needle = args.project.lower()
        sessions = [session for session in sessions if needle in session.project.lower()]

    sort = SortField(args.sort)
    if sort is SortField.NAME or args.list or args.stats or args.prune_empty:
        failed = load_all_metadata(sessions)
        if failed:
            logger.warning("Could not read %d session(s)", failed)
    sessions = _ordered_sessions(sessions, sort, args.reverse)

    if args.count:
        out.write(f"{len(sessions)}\n")
        return 0
    if args.stats:
        print_stats(sessions, out)
        return 0
    if args.prune_empty:
        prune_empty(sessions, args.dry_run, out)
        return 0
    if args.list:
        print_list(sessions, out)
        return 0
    return run_tui(sessions, args.projects_dir, sort, args.reverse)


if __name__ == "__main__":
    sys.exit(main())
