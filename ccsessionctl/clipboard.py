"""Copy text to the system clipboard through the usual command-line tools."""
from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger("ccsessionctl.clipboard")

# X11, X11, Wayland, macOS
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("wl-copy",),
    ("pbcopy",),
)


def copy_to_clipboard(text: str) -> bool:
    """Return True once one of the clipboard tools accepted ``text``."""
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            result = subprocess.run(
                list(command),
                input=text.encode("utf-8"),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Clipboard command %s failed: %s", command[0], exc)
            continue
        if result.returncode == 0:
            return True
    return False


def resume_command(project_dir: str, session_id: str) -> str:
    return f"cd {project_dir} && claude --resume {session_id}"
