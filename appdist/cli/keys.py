"""Single-keypress input from the controlling terminal.

``read_key`` blocks until one logical key is available and returns a
``KeyEvent``. Arrow keys arrive as escape sequences; the bytes following
ESC are only waited for briefly so a lone ESC press is not mistaken for
the start of a sequence.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from appdist.core.result import Err, Ok, Result
from appdist.services.distribute.errors import DistributeError

__all__ = [
    "Key",
    "KeyEvent",
    "KeyReader",
    "decode_key",
    "is_interactive_terminal",
    "read_key",
    "require_tty",
]

ESC = "\x1b"
ESCAPE_TIMEOUT_SECONDS = 0.1


class Key(Enum):
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    SPACE = auto()
    ESCAPE = auto()
    CHAR = auto()


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: Key
    char: str = ""


KeyReader = Callable[[], KeyEvent]

_ARROW_SUFFIXES = {
    "[A": Key.UP,
    "[B": Key.DOWN,
    "[C": Key.RIGHT,
    "[D": Key.LEFT,
    # Application cursor mode
    "OA": Key.UP,
    "OB": Key.DOWN,
    "OC": Key.RIGHT,
    "OD": Key.LEFT,
}

_WINDOWS_ARROWS = {"H": Key.UP, "P": Key.DOWN, "M": Key.RIGHT, "K": Key.LEFT}


def decode_key(first: str, rest: str = "") -> KeyEvent:
    """Map a raw read to a logical key.

    Args:
        first: The first character read (may be empty on EOF).
        rest: Up to two characters read after an ESC.
    """
    if first == ESC:
        return KeyEvent(_ARROW_SUFFIXES.get(rest, Key.ESCAPE))
    if first in ("", "\r", "\n"):
        return KeyEvent(Key.ENTER)
    if first == " ":
        return KeyEvent(Key.SPACE)
    return KeyEvent(Key.CHAR, first)


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def require_tty() -> Result[None, DistributeError]:
    """Fail fast instead of blocking on a pipe or closed stdin."""
    if is_interactive_terminal():
        return Ok(None)
    return Err(
        DistributeError(
            kind="no_tty",
            message="interactive wizard requires a terminal (stdin and stdout must be a TTY)",
            hint="run appdist directly from a terminal, not through a pipe or CI job",
        )
    )


def read_key() -> KeyEvent:
    """Block for exactly one key press.

    Raises:
        KeyboardInterrupt: On Ctrl-C, which raw mode delivers as a byte.
    """
    if os.name == "nt":
        return _read_key_windows()
    return _read_key_posix()


def _read_key_windows() -> KeyEvent:
    import msvcrt

    ch = msvcrt.getwch()
    if ch == "\x03":
        raise KeyboardInterrupt
    if ch in ("\x00", "\xe0"):
        return KeyEvent(_WINDOWS_ARROWS.get(msvcrt.getwch(), Key.ESCAPE))
    return decode_key(ch)


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _read_key_posix() -> KeyEvent:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd, termios.TCSANOW)
        raw = os.read(fd, 1)
        if raw == b"\x03":
            raise KeyboardInterrupt
        if raw == ESC.encode():
            rest = b""
            while len(rest) < 2:
                ready, _, _ = select.select([fd], [], [], ESCAPE_TIMEOUT_SECONDS)
                if not ready:
                    break
                chunk = os.read(fd, 2 - len(rest))
                if not chunk:
                    break
                rest += chunk
            return decode_key(ESC, rest.decode("ascii", errors="replace"))
        if raw:
            missing = _utf8_length(raw[0]) - 1
            while missing > 0:
                chunk = os.read(fd, missing)
                if not chunk:
                    break
                raw += chunk
                missing -= len(chunk)
        return decode_key(raw.decode("utf-8", errors="replace"))
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)
