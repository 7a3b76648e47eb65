import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from ccsessionctl import cli
from ccsessionctl.models import SortField


def _user(text: str) -> dict:
    return {
        "type": "user",
        "uuid": "u1",
        "timestamp": "2026-02-16T10:00:00Z",
        "message": {"role": "user", "content": text},
    }


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self._write("-home-u-alpha", "a1", [_user("Alpha question")], 1_700_000_000)
        self._write("-home-u-alpha", "a2", [{"type": "summary", "summary": "Zed summary"}], 1_700_000_100)
        self._write("-home-u-beta", "b1", [_user("<system-reminder>only</system-reminder>")], 1_700_000_200)
        self._write("-home-u-beta", "empty", [], 1_700_000_300)

    def _write(self, project: str, session_id: str, lines: list[dict], mtime: int) -> Path:
        path = self.root / project / f"{session_id}.jsonl"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path

    def _run(self, *args: str) -> str:
        out = io.StringIO()
        code = cli.main(["--projects-dir", str(self.root), *args], out=out)
        self.assertEqual(code, 0)
        return out.getvalue()

    def test_count(self) -> None:
        self.assertEqual(self._run("--count"), "4\n")
        self.assertEqual(self._run("--count", "--project", "ALP"), "2\n")

    def test_list_is_tab_separated_newest_first(self) -> None:
        rows = [line.split("\t") for line in self._run("--list").splitlines()]
        self.assertEqual([row[1] for row in rows], ["empty", "b1", "a2", "a1"])
        self.assertEqual(rows[3][0], "alpha")
        self.assertEqual(rows[3][4], "Alpha question")
        self.assertEqual(rows[2][4], "Zed summary")
        self.assertEqual(rows[1][4], "[1 message]")
        self.assertEqual(rows[0][4], "[empty]")

    def test_list_sort_and_reverse(self) -> None:
        rows = [line.split("\t")[1] for line in self._run("--list", "--sort", "date", "--reverse").splitlines()]
        self.assertEqual(rows, ["a1", "a2", "b1", "empty"])

        rows = [line.split("\t")[1] for line in self._run("--list", "--sort", "name").splitlines()]
        self.assertEqual(rows[-2:], ["a1", "a2"])

    def test_stats_totals(self) -> None:
        output = self._run("--stats")
        lines = output.splitlines()
        self.assertTrue(lines[0].startswith("Project"))
        self.assertTrue(any(line.startswith("alpha") for line in lines))
        self.assertTrue(any(line.startswith("beta") for line in lines))
        total = lines[-1].split()
        self.assertEqual(total[0], "TOTAL")
        self.assertEqual(total[1], "4")

    def test_prune_empty_dry_run_keeps_files(self) -> None:
        output = self._run("--prune-empty", "--dry-run")
        self.assertIn("Would delete 1 empty session(s):", output)
        self.assertIn("beta / empty", output)
        self.assertTrue((self.root / "-home-u-beta" / "empty.jsonl").exists())

    def test_prune_empty_deletes(self) -> None:
        output = self._run("--prune-empty")
        self.assertIn("Deleted 1 session(s)", output)
        self.assertFalse((self.root / "-home-u-beta" / "empty.jsonl").exists())
        self.assertTrue((self.root / "-home-u-beta" / "b1.jsonl").exists())
        self.assertEqual(self._run("--prune-empty"), "No empty sessions found.\n")

    def test_no_flags_launches_browser(self) -> None:
        with patch.object(cli, "run_tui", return_value=0) as run_tui:
            self.assertEqual(cli.main(["--projects-dir", str(self.root), "-s", "size", "-r"]), 0)
        sessions, projects_dir, sort, reverse = run_tui.call_args.args
        self.assertEqual(len(sessions), 4)
        self.assertEqual(projects_dir, self.root)
        self.assertIs(sort, SortField.SIZE)
        self.assertTrue(reverse)

    def test_collect_project_stats_orders_by_size(self) -> None:
        stats = cli.collect_project_stats(cli.scan_sessions(self.root))
        self.assertEqual({entry.project for entry in stats}, {"alpha", "beta"})
        self.assertGreaterEqual(stats[0].size_bytes, stats[1].size_bytes)


if __name__ == "__main__":
    unittest.main()
