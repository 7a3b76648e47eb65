import unittest

from rich.text import Text

from ccsessionctl.highlight import (
    CodeBlock,
    CodeHighlighter,
    block_for_line,
    parse_code_blocks,
    supports_language,
)


class CodeBlockTests(unittest.TestCase):
    def test_fenced_blocks_are_located(self) -> None:
        lines = [
            "[Assistant] 2026-02-16 10:00:00",
            "```python",
            "x = 1",
            "y = 2",
            "```",
            "text",
            "```",
            "plain",
            "```",
            "```rust",
            "never closed",
        ]
        blocks = parse_code_blocks(lines)
        self.assertEqual(
            blocks,
            [
                CodeBlock(start=2, end=4, language="python"),
                CodeBlock(start=7, end=8, language=""),
            ],
        )
        self.assertEqual(block_for_line(blocks, 3), blocks[0])
        self.assertIsNone(block_for_line(blocks, 4))
        self.assertIsNone(block_for_line(blocks, 10))

    def test_language_support(self) -> None:
        self.assertTrue(supports_language("python"))
        self.assertFalse(supports_language(""))
        self.assertFalse(supports_language("definitely-not-a-language"))

    def test_highlight_line_keeps_text(self) -> None:
        highlighter = CodeHighlighter()
        highlighted = highlighter.highlight_line("def f(): pass", "python")
        self.assertIsInstance(highlighted, Text)
        self.assertEqual(highlighted.plain, "def f(): pass")
        self.assertTrue(highlighted.spans)

    def test_unknown_language_is_plain(self) -> None:
        text = CodeHighlighter().highlight_line("whatever", "nope-lang")
        self.assertEqual(text.plain, "whatever")
        self.assertEqual(text.spans, [])


if __name__ == "__main__":
    unittest.main()
