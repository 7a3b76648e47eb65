"""Fenced code block detection and syntax highlighting for the preview pane."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.syntax import Syntax
from rich.text import Text

CODE_FENCE = "```"
DEFAULT_THEME = "ansi_dark"


@dataclass(frozen=True)
class CodeBlock:
    """Lines ``start`` (inclusive) to ``end`` (exclusive) hold the code."""

    start: int
    end: int
    language: str

    def contains(self, idx: int) -> bool:
        return self.start <= idx < self.end


def parse_code_blocks(lines: list[str]) -> list[CodeBlock]:
    """Locate fenced code blocks; unterminated fences are ignored."""
    blocks: list[CodeBlock] = []
    in_block = False
    start = 0
    language = ""

    for idx, line in enumerate(lines):
        if not line.startswith(CODE_FENCE):
            continue
        if in_block:
            blocks.append(CodeBlock(start=start, end=idx, language=language))
            in_block = False
            language = ""
        else:
            in_block = True
            start = idx + 1
            language = line.lstrip("`").strip()

    return blocks


def block_for_line(blocks: list[CodeBlock], idx: int) -> CodeBlock | None:
    for block in blocks:
        if block.contains(idx):
            return block
    return None


@lru_cache(maxsize=64)
def supports_language(language: str) -> bool:
    if not language:
        return False
    try:
        get_lexer_by_name(language)
    except ClassNotFound:
        return False
    return True


class CodeHighlighter:
    """Stateless line highlighter handed to the preview renderer."""

    def __init__(self, theme: str = DEFAULT_THEME) -> None:
        self.theme = theme

    def highlight_line(self, line: str, language: str) -> Text:
        if not supports_language(language):
            return Text(line)
        syntax = Syntax(line, language, theme=self.theme)
        text = syntax.highlight(line)
        text.rstrip()
        return text
