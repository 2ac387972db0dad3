"""Full-screen frame rendering for the wizard widgets.

Every state change redraws the whole screen: banner, the summary of the
steps already answered, then the widget body. Frames are written in a
single call so the terminal never shows a half-drawn screen.
"""

from __future__ import annotations

import os
import signal
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from types import FrameType
from typing import TextIO

__all__ = [
    "Frame",
    "banner",
    "hidden_cursor",
    "paint",
    "render",
]

# ANSI SGR codes
ORANGE = "38;5;208"
WHITE = "97"
DARK_GRAY = "90"
RED = "31"
BOLD = "1"

ICON_STAR = "✦"
ICON_FILLED = "●"
ICON_EMPTY = "○"
ICON_CHECKBOX_ON = "◆"
ICON_CHECKBOX_OFF = "◇"
ICON_SUCCESS = "✓"
ICON_ARROW = "›"

CLEAR_SCREEN = "\x1b[2J\x1b[H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

_BANNER_ART = (
    " █████╗ ██████╗ ██████╗     ██████╗ ██╗███████╗████████╗",
    "██╔══██╗██╔══██╗██╔══██╗    ██╔══██╗██║██╔════╝╚══██╔══╝",
    "███████║██████╔╝██████╔╝    ██║  ██║██║███████╗   ██║   ",
    "██╔══██║██╔═══╝ ██╔═══╝     ██║  ██║██║╚════██║   ██║   ",
    "██║  ██║██║     ██║         ██████╔╝██║███████║   ██║   ",
    "╚═╝  ╚═╝╚═╝     ╚═╝         ╚═════╝ ╚═╝╚══════╝   ╚═╝   ",
)


def _color_enabled() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def banner() -> tuple[str, ...]:
    art = tuple(paint(f"  {line}", WHITE, BOLD) for line in _BANNER_ART)
    return ("", *art, "")


@dataclass(frozen=True, slots=True)
class Frame:
    """Immutable snapshot of one screen."""

    banner: tuple[str, ...]
    context: tuple[str, ...]
    body: tuple[str, ...]

    def text(self) -> str:
        lines = list(self.banner)
        if self.context:
            lines.extend(self.context)
            lines.append("")
        lines.extend(self.body)
        return "\n".join(lines) + "\n"


def render(frame: Frame, stream: TextIO | None = None) -> None:
    """Clear the screen and write ``frame`` in one go."""
    out = stream if stream is not None else sys.stdout
    out.write(CLEAR_SCREEN + frame.text())
    out.flush()


def _terminate(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def hidden_cursor(stream: TextIO | None = None) -> Iterator[None]:
    """Hide the terminal cursor for the duration of the block.

    The cursor is shown again on normal exit, on exceptions (including
    KeyboardInterrupt) and on SIGTERM, which is turned into SystemExit
    while the block is active.
    """
    out = stream if stream is not None else sys.stdout
    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGTERM, _terminate)

    out.write(HIDE_CURSOR)
    out.flush()
    try:
        yield
    finally:
        out.write(SHOW_CURSOR)
        out.flush()
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)
