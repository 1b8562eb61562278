"""Terminal kind probe and cursor escape sequences.

Two terminal families are supported: ANSI-capable Windows consoles, which
only honor the "previous/next line" CSI forms, and everything else.
"""

from __future__ import annotations

import os
import sys

ESC = "\x1b"


def is_windows_ansi() -> bool:
    """Return True when running in an ANSI-capable Windows console."""
    if sys.platform != "win32":
        return False
    return bool(
        os.environ.get("ANSICON")
        or os.environ.get("ConEmuANSI") == "ON"
        or os.environ.get("WT_SESSION")
    )


def line_start_sequence(windows_ansi: bool | None = None) -> str:
    """Sequence that moves the cursor to column 0 of the current line.

    Printed before the first prompt to cancel any partial line the host
    terminal left behind.
    """
    if windows_ansi is None:
        windows_ansi = is_windows_ansi()
    return f"{ESC}[0F" if windows_ansi else f"{ESC}[0G"


def cursor_up(lines: int, windows_ansi: bool | None = None) -> str:
    """Move the cursor up ``lines`` rows and to column 0."""
    if windows_ansi is None:
        windows_ansi = is_windows_ansi()
    if windows_ansi:
        return f"{ESC}[{lines}F"
    return f"{ESC}[{lines}A{ESC}[0G"


def cursor_down(lines: int, windows_ansi: bool | None = None) -> str:
    """Move the cursor down ``lines`` rows and to column 0."""
    if windows_ansi is None:
        windows_ansi = is_windows_ansi()
    if windows_ansi:
        return f"{ESC}[{lines}E"
    return f"{ESC}[{lines}B{ESC}[0G"
