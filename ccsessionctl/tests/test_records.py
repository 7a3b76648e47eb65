import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from ccsessionctl.errors import SessionReadError
from ccsessionctl.parsers.records import (
    AssistantRecord,
    CustomTitleRecord,
    FileHistorySnapshotRecord,
    OtherBlock,
    QueueOperationRecord,
    SummaryRecord,
    SystemRecord,
    TextBlock,
    ToolUseBlock,
    UnknownRecord,
    UserRecord,
    decode_record,
    iter_records,
)


class DecodeRecordTests(unittest.TestCase):
    def test_user_record_with_string_content(self) -> None:
        record = decode_record(
            json.dumps(
                {
                    "type": "user",
                    "uuid": "u1",
                    "timestamp": "2026-02-16T10:00:00Z",
                    "sessionId": "s1",
                    "gitBranch": "main",
                    "isMeta": False,
                    "message": {"role": "user", "content": "hello"},
                }
            )
        )
        self.assertIsInstance(record, UserRecord)
        assert isinstance(record, UserRecord)
        self.assertEqual(record.message.content, "hello")
        self.assertEqual(record.session_id, "s1")
        self.assertEqual(record.git_branch, "main")
        self.assertEqual(record.timestamp, datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc))

    def test_assistant_record_with_blocks(self) -> None:
        record = decode_record(
            json.dumps(
                {
                    "type": "assistant",
                    "uuid": "a1",
                    "timestamp": "2026-02-16T10:00:01Z",
                    "message": {
                        "role": "assistant",
                        "model": "claude-sonnet",
                        "content": [
                            {"type": "text", "text": "sure"},
                            {"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "ls"}},
                            {"type": "image", "source": {}},
                        ],
                    },
                }
            )
        )
        self.assertIsInstance(record, AssistantRecord)
        assert isinstance(record, AssistantRecord)
        blocks = record.message.content
        self.assertIsInstance(blocks[0], TextBlock)
        self.assertIsInstance(blocks[1], ToolUseBlock)
        self.assertIsInstance(blocks[2], OtherBlock)

    def test_metadata_records(self) -> None:
        summary = decode_record('{"type": "summary", "summary": "Fix login", "leafUuid": "l1"}')
        self.assertIsInstance(summary, SummaryRecord)
        assert isinstance(summary, SummaryRecord)
        self.assertEqual(summary.leaf_uuid, "l1")

        title = decode_record('{"type": "custom-title", "customTitle": "My title"}')
        self.assertIsInstance(title, CustomTitleRecord)
        assert isinstance(title, CustomTitleRecord)
        self.assertEqual(title.custom_title, "My title")

        snapshot = decode_record('{"type": "file-history-snapshot", "messageId": "m1", "snapshot": {}}')
        self.assertIsInstance(snapshot, FileHistorySnapshotRecord)

        queue = decode_record('{"type": "queue-operation", "operation": "enqueue"}')
        self.assertIsInstance(queue, QueueOperationRecord)

        system = decode_record('{"type": "system", "timestamp": "2026-02-16T10:00:00Z"}')
        self.assertIsInstance(system, SystemRecord)

    def test_unknown_tag_decodes_to_catch_all(self) -> None:
        record = decode_record('{"type": "progress", "data": {"x": 1}}')
        self.assertIsInstance(record, UnknownRecord)
        assert isinstance(record, UnknownRecord)
        self.assertEqual(record.type, "progress")

    def test_malformed_input_is_skipped(self) -> None:
        for line in [
            "",
            "   ",
            "not json",
            '{"type": "user"',
            "[1, 2, 3]",
            '"just a string"',
            "null",
            "{}",
            '{"type": 7}',
            '{"type": "user", "uuid": "u1"}',
            '{"type": "summary"}',
            '{"type": "user", "uuid": "u1", "timestamp": "yesterday", "message": {"content": "x"}}',
            '{"type": "user", "x": ' + "[" * 100_000 + "]" * 100_000 + "}",
        ]:
            with self.subTest(line=line):
                self.assertIsNone(decode_record(line))


class IterRecordsTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "session.jsonl"
        path.write_text(text, encoding="utf-8")
        return path

    def test_skips_bad_lines_and_keeps_order(self) -> None:
        path = self._write(
            "\n".join(
                [
                    '{"type": "summary", "summary": "first"}',
                    "garbage",
                    "",
                    '{"type": "custom-title", "customTitle": "second"}',
                    '{"type": "summary", "summary": "trunc',
                ]
            )
        )
        records = list(iter_records(path))
        self.assertEqual(len(records), 2)
        self.assertIsInstance(records[0], SummaryRecord)
        self.assertIsInstance(records[1], CustomTitleRecord)

    def test_missing_file_raises_read_error(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        missing = Path(tmpdir.name) / "missing.jsonl"
        with self.assertRaises(SessionReadError) as ctx:
            list(iter_records(missing))
        self.assertEqual(ctx.exception.path, missing)
        self.assertIsInstance(ctx.exception, OSError)


if __name__ == "__main__":
    unittest.main()
