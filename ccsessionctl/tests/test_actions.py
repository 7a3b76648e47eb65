import json
import tarfile
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from ccsessionctl.actions import (
    archive_each,
    archive_session,
    archive_sessions,
    can_delete,
    default_archive_dir,
    default_export_dir,
    delete_session,
    delete_sessions,
    export_session_markdown,
    export_session_to_string,
    export_sessions_markdown,
)
from ccsessionctl.errors import ActionError
from ccsessionctl.models import Session


class ActionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self.project_dir = self.root / "-home-u-demo"
        self.project_dir.mkdir()
        self.output_dir = self.root / "out"
        self.output_dir.mkdir()

    def _session(self, session_id: str = "s1", with_dir: bool = False) -> Session:
        path = self.project_dir / f"{session_id}.jsonl"
        lines = [
            {"type": "summary", "summary": "Demo summary"},
            {
                "type": "user",
                "uuid": "u1",
                "timestamp": "2026-02-16T10:00:00Z",
                "message": {"role": "user", "content": "Hello there"},
            },
            {
                "type": "assistant",
                "uuid": "a1",
                "timestamp": "2026-02-16T10:00:05Z",
                "message": {"role": "assistant", "content": [{"type": "text", "text": "Hi!"}]},
            },
        ]
        path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")
        if with_dir:
            (self.project_dir / session_id).mkdir()
            (self.project_dir / session_id / "tool-output.txt").write_text("x", encoding="utf-8")
        session = Session.new(
            id=session_id,
            project="demo",
            project_raw=self.project_dir.name,
            path=path,
            size_bytes=path.stat().st_size,
            modified=datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc),
        )
        session.summary = "Demo summary"
        return session


class DeleteActionTests(ActionTestCase):
    def test_delete_removes_file_and_directory(self) -> None:
        session = self._session(with_dir=True)
        self.assertTrue(can_delete(session.path))

        delete_session(session)

        self.assertFalse(session.path.exists())
        self.assertFalse(session.directory.exists())
        self.assertFalse(can_delete(session.path))

    def test_delete_missing_file_raises_action_error(self) -> None:
        session = self._session()
        session.path.unlink()
        with self.assertRaises(ActionError) as ctx:
            delete_session(session)
        self.assertEqual(ctx.exception.action, "delete")
        self.assertEqual(ctx.exception.session_id, "s1")

    def test_bulk_delete_counts_successes(self) -> None:
        first = self._session("s1")
        second = self._session("s2")
        second.path.unlink()
        with self.assertLogs("ccsessionctl.actions", level="WARNING"):
            self.assertEqual(delete_sessions([first, second]), 1)


class ExportActionTests(ActionTestCase):
    def test_markdown_document(self) -> None:
        document = export_session_to_string(self._session())
        self.assertTrue(document.startswith("# Session: s1\n\n**Project:** demo\n"))
        self.assertIn("**Date:** 2026-02-16 10:00:00 UTC", document)
        self.assertIn("**Summary:** Demo summary", document)
        self.assertIn("### **User** (10:00:00)\n\nHello there", document)
        self.assertIn("### **Assistant** (10:00:05)\n\nHi!", document)

    def test_export_writes_named_file(self) -> None:
        path = export_session_markdown(self._session(), self.output_dir)
        self.assertEqual(path, self.output_dir / "demo_s1.md")
        self.assertIn("Hello there", path.read_text(encoding="utf-8"))

    def test_bulk_export_skips_failures(self) -> None:
        good = self._session("s1")
        bad = self._session("s2")
        bad.path.unlink()
        with self.assertLogs("ccsessionctl.actions", level="WARNING"):
            paths = export_sessions_markdown([good, bad], self.output_dir)
        self.assertEqual(paths, [self.output_dir / "demo_s1.md"])

    def test_export_tolerates_split_surrogate_pairs(self) -> None:
        session = self._session("s3")
        with session.path.open("a", encoding="utf-8") as handle:
            handle.write(
                '\n{"type": "user", "uuid": "u2", "timestamp": "2026-02-16T10:01:00Z",'
                ' "message": {"role": "user", "content": "cut emoji \\ud83d here"}}\n'
            )

        paths = export_sessions_markdown([session], self.output_dir)

        self.assertEqual(paths, [self.output_dir / "demo_s3.md"])
        document = paths[0].read_text(encoding="utf-8")
        self.assertIn("cut emoji ? here", document)

    def test_default_export_dir_is_created(self) -> None:
        target = self.root / "exports" / "nested"
        self.assertEqual(default_export_dir(target), target)
        self.assertTrue(target.is_dir())


class ArchiveActionTests(ActionTestCase):
    def test_archive_single_session_with_directory(self) -> None:
        session = self._session(with_dir=True)
        path = archive_session(session, self.output_dir)
        self.assertEqual(path, self.output_dir / "demo_s1.tar.gz")
        with tarfile.open(path, "r:gz") as archive:
            names = archive.getnames()
        self.assertIn("s1.jsonl", names)
        self.assertIn("s1/tool-output.txt", names)

    def test_archive_many_into_one_tarball(self) -> None:
        sessions = [self._session("s1", with_dir=True), self._session("s2")]
        output = self.output_dir / "bundle.tar.gz"
        self.assertEqual(archive_sessions(sessions, output), 2)
        with tarfile.open(output, "r:gz") as archive:
            names = archive.getnames()
        self.assertIn("demo/s1.jsonl", names)
        self.assertIn("demo/s1/tool-output.txt", names)
        self.assertIn("demo/s2.jsonl", names)

    def test_archive_each_skips_failures(self) -> None:
        good = self._session("s1")
        bad = self._session("s2")
        bad.path.unlink()
        with self.assertLogs("ccsessionctl.actions", level="WARNING"):
            paths = archive_each([good, bad], self.output_dir)
        self.assertEqual(paths, [self.output_dir / "demo_s1.tar.gz"])

    def test_default_archive_dir_is_created(self) -> None:
        target = self.root / "archives"
        self.assertEqual(default_archive_dir(target), target)
        self.assertTrue(target.is_dir())


if __name__ == "__main__":
    unittest.main()
