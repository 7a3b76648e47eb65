"""Text extraction and classification for transcript message content."""
from __future__ import annotations

from typing import Any, Optional

from ccsessionctl.parsers.records import (
    ContentBlock,
    MessageContent,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)

ELLIPSIS = "..."
THINKING_MARKER = "💭"
TOOL_USE_MARKER = "🔧"
TOOL_RESULT_MARKER = "📋"
TOOL_RESULT_FALLBACK = "(result)"

TOOL_INPUT_PREVIEW_KEYS = ("command", "pattern", "file_path")
TOOL_INPUT_PREVIEW_LIMIT = 60
TOOL_RESULT_LIMIT = 200

# Markers Claude Code uses when it injects content into the user turn.
# Matched as lowercase prefixes of the flattened text.
SYSTEM_CONTENT_PREFIXES: tuple[str, ...] = (
    "<system-reminder>",
    "<context>",
    "<claude-background-info>",
    "<command-name>",
    "<command-message>",
    "<command-args>",
    "<command-contents>",
    "<local-command-stdout>",
    "<local-command-stderr>",
    "<local-command-caveat>",
    "<user-prompt-submit-hook>",
    "<bash-input>",
    "<bash-stdout>",
    "<bash-stderr>",
    "<task-notification>",
    "<ide_opened_file>",
    "<ide_selection>",
    "<ide_diagnostics>",
    "<environment_context>",
    "<environment_details>",
    "<user_instructions>",
    "<session-start-hook>",
    "<post-tool-use-hook>",
    "<new-diagnostics>",
    "caveat: the messages below were generated by the user while running local commands",
)


def truncate(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` characters, ending in ``...`` when cut."""
    if len(text) <= max_chars:
        return text
    if max_chars < len(ELLIPSIS):
        return text[: max(max_chars, 0)]
    return text[: max_chars - len(ELLIPSIS)] + ELLIPSIS


def truncate_message(text: str, max_chars: int) -> str:
    """Single-line preview: trimmed, newlines flattened, then truncated."""
    flattened = text.strip().replace("\r\n", " ").replace("\n", " ")
    return truncate(flattened, max_chars)


def _tool_input_preview(tool_input: Any) -> str:
    if not isinstance(tool_input, dict):
        return ""
    for key in TOOL_INPUT_PREVIEW_KEYS:
        if key not in tool_input:
            continue
        value = tool_input[key]
        if not isinstance(value, str):
            return ""
        return f' "{truncate(value, TOOL_INPUT_PREVIEW_LIMIT)}"'
    return ""


def format_tool_result(payload: Any) -> str:
    if isinstance(payload, list):
        texts = [
            item["text"]
            for item in payload
            if isinstance(item, dict) and isinstance(item.get("text"), str)
        ]
        if texts:
            return truncate("\n".join(texts), TOOL_RESULT_LIMIT)
    if isinstance(payload, str):
        return truncate(payload, TOOL_RESULT_LIMIT)
    return TOOL_RESULT_FALLBACK


def extract_block_text(block: ContentBlock) -> Optional[str]:
    """Render one content block as a line of readable text.

    Returns ``None`` for block types that carry no displayable text.
    """
    if isinstance(block, TextBlock):
        return block.text
    if isinstance(block, ThinkingBlock):
        return f"{THINKING_MARKER} {block.thinking}"
    if isinstance(block, ToolUseBlock):
        return f"{TOOL_USE_MARKER} {block.name}{_tool_input_preview(block.input)}"
    if isinstance(block, ToolResultBlock):
        return f"{TOOL_RESULT_MARKER} {format_tool_result(block.content)}"
    return None


def content_as_text(content: MessageContent) -> str:
    if isinstance(content, str):
        return content
    parts = [text for text in (extract_block_text(block) for block in content) if text is not None]
    return "\n".join(parts)


def is_system_content(content: MessageContent) -> bool:
    """True when the text was injected by tooling rather than typed by the user."""
    text = content_as_text(content)
    if not text:
        return True
    lowered = text.lower()
    return lowered.startswith(SYSTEM_CONTENT_PREFIXES)
