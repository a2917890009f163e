"""
System clipboard sink.

On Linux the text is piped to the first clipboard command that works
(``xclip``, ``xsel --keep`` or ``wl-copy``); these keep the selection alive
after pacont exits. Everywhere else, and when none of them is installed,
``pyperclip`` does the copy.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import List, Sequence

import pyperclip

from .core import ClipboardError

LINUX_COMMANDS: List[Sequence[str]] = [
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input", "--keep"),
    ("wl-copy",),
]


def _run_command(command: Sequence[str], text: str) -> bool:
    if shutil.which(command[0]) is None:
        return False
    try:
        proc = subprocess.run(
            list(command),
            input=text.encode("utf-8"),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return proc.returncode == 0


def copy_to_clipboard(text: str) -> None:
    if sys.platform.startswith("linux"):
        for command in LINUX_COMMANDS:
            if _run_command(command, text):
                return
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Failed to copy to clipboard: {e}") from e
