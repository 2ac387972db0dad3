"""Interactive prompts used by the release wizard.

Five widgets are provided: ``select_one``, ``select_many``, ``confirm``,
``text_input`` and ``multiline_input``. The menu widgets run a small event
loop over ``read_key`` and redraw the full frame after every key; the text
widgets read whole lines.

Input and output are injectable (``keys``, ``read_line``, ``stream``) so the
widgets can be driven by scripted input in tests.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, Literal, TextIO, TypeVar

from appdist.cli.keys import Key, KeyReader, read_key
from appdist.cli.render import (
    DARK_GRAY,
    ICON_ARROW,
    ICON_CHECKBOX_OFF,
    ICON_CHECKBOX_ON,
    ICON_EMPTY,
    ICON_FILLED,
    ORANGE,
    WHITE,
    Frame,
    banner,
    hidden_cursor,
    paint,
    render,
)

T = TypeVar("T")

ConfirmAnswer = Literal["yes", "no"]
LineReader = Callable[[], str]

_RULE = "-" * 40


@dataclass(frozen=True, slots=True)
class SelectorOption(Generic[T]):
    value: T
    label: str


# -----------------------------------------------------------------------------
# State transitions
# -----------------------------------------------------------------------------


def move_cursor(index: int, delta: int, count: int) -> int:
    """Move the cursor by ``delta``, wrapping around both ends."""
    return (index + delta) % count


def initial_selection(count: int) -> list[bool]:
    """Only the first option starts selected."""
    return [i == 0 for i in range(count)]


def toggle(selection: Sequence[bool], index: int) -> list[bool]:
    out = list(selection)
    out[index] = not out[index]
    return out


def selected_labels(labels: Sequence[str], selection: Sequence[bool]) -> list[str]:
    """Labels whose bit is set, in option order; the first label if none."""
    chosen = [label for label, on in zip(labels, selection, strict=True) if on]
    return chosen or [labels[0]]


def join_selection(labels: Sequence[str]) -> str:
    return ", ".join(labels)


def answer(yes: bool) -> ConfirmAnswer:
    return "yes" if yes else "no"


# -----------------------------------------------------------------------------
# Frame bodies
# -----------------------------------------------------------------------------


def _title(title: str, hint: str) -> list[str]:
    return [f"  {paint(title, WHITE)}", f"  {hint}", ""]


def _key_hint(*parts: tuple[str, str]) -> str:
    """Join ``(key, action)`` pairs into a dimmed hint line."""
    chunks = [paint(key, ORANGE) + paint(f" to {action}", DARK_GRAY) for key, action in parts]
    return paint("Use ", DARK_GRAY) + paint(", ", DARK_GRAY).join(chunks)


def single_select_body(title: str, labels: Sequence[str], index: int) -> tuple[str, ...]:
    lines = _title(title, _key_hint(("arrows", "navigate"), ("Enter", "select")))
    for i, label in enumerate(labels):
        if i == index:
            lines.append(f"    {paint(ICON_FILLED, ORANGE)} {paint(label, WHITE)}")
        else:
            lines.append(f"    {paint(f'{ICON_EMPTY} {label}', DARK_GRAY)}")
    return tuple(lines)


def multi_select_body(
    title: str, labels: Sequence[str], index: int, selection: Sequence[bool]
) -> tuple[str, ...]:
    lines = _title(
        title,
        _key_hint(("arrows", "navigate"), ("Space", "toggle"), ("Enter", "confirm")),
    )
    for i, label in enumerate(labels):
        if selection[i]:
            box = paint(ICON_CHECKBOX_ON, ORANGE)
        else:
            box = paint(ICON_CHECKBOX_OFF, DARK_GRAY)
        text = paint(label, WHITE if i == index else DARK_GRAY)
        lines.append(f"    {box} {text}")
    return tuple(lines)


def confirm_body(summary: Sequence[str], yes: bool) -> tuple[str, ...]:
    rule = f"  {paint(_RULE, DARK_GRAY)}"
    lines = [rule, f"  {paint('Build Summary', WHITE)}", rule, ""]
    lines.extend(f"    {line}" for line in summary)
    lines.extend(["", rule, "", f"  {paint('Proceed with build and upload?', WHITE)}", ""])

    on_yes = f"{paint(ICON_FILLED, ORANGE)} {paint('Yes', WHITE)}"
    off_yes = paint(f"{ICON_EMPTY} Yes", DARK_GRAY)
    on_no = f"{paint(ICON_FILLED, ORANGE)} {paint('No', WHITE)}"
    off_no = paint(f"{ICON_EMPTY} No", DARK_GRAY)
    if yes:
        lines.append(f"    {on_yes}     {off_no}")
    else:
        lines.append(f"    {off_yes}     {on_no}")
    return tuple(lines)


def text_body(prompt: str, hint: str) -> tuple[str, ...]:
    return tuple(_title(prompt, paint(hint, DARK_GRAY)))


# -----------------------------------------------------------------------------
# Widgets
# -----------------------------------------------------------------------------


def _frame(context: Sequence[str], body: tuple[str, ...]) -> Frame:
    return Frame(banner=banner(), context=tuple(context), body=body)


def select_one(
    *,
    title: str,
    options: Sequence[SelectorOption[T]],
    context: Sequence[str] = (),
    keys: KeyReader = read_key,
    stream: TextIO | None = None,
) -> T:
    """Pick one option with UP/DOWN and ENTER."""
    if not options:
        raise ValueError("selector requires at least one option")

    labels = [o.label for o in options]
    idx = 0
    with hidden_cursor(stream):
        while True:
            render(_frame(context, single_select_body(title, labels, idx)), stream)
            event = keys()
            if event.key is Key.UP:
                idx = move_cursor(idx, -1, len(options))
            elif event.key is Key.DOWN:
                idx = move_cursor(idx, 1, len(options))
            elif event.key is Key.ENTER:
                return options[idx].value


def select_many(
    *,
    title: str,
    labels: Sequence[str],
    context: Sequence[str] = (),
    keys: KeyReader = read_key,
    stream: TextIO | None = None,
) -> list[str]:
    """Toggle options with SPACE; ENTER returns the chosen labels in order."""
    if not labels:
        raise ValueError("selector requires at least one option")

    idx = 0
    selection = initial_selection(len(labels))
    with hidden_cursor(stream):
        while True:
            body = multi_select_body(title, labels, idx, selection)
            render(_frame(context, body), stream)
            event = keys()
            if event.key is Key.UP:
                idx = move_cursor(idx, -1, len(labels))
            elif event.key is Key.DOWN:
                idx = move_cursor(idx, 1, len(labels))
            elif event.key is Key.SPACE:
                selection = toggle(selection, idx)
            elif event.key is Key.ENTER:
                return selected_labels(labels, selection)


_CONFIRM_TOGGLES = frozenset({Key.LEFT, Key.RIGHT, Key.UP, Key.DOWN})


def confirm(
    *,
    summary: Sequence[str],
    keys: KeyReader = read_key,
    stream: TextIO | None = None,
) -> ConfirmAnswer:
    """Yes/No dialog starting on Yes; any arrow flips the choice."""
    yes = True
    with hidden_cursor(stream):
        while True:
            render(_frame((), confirm_body(summary, yes)), stream)
            event = keys()
            if event.key in _CONFIRM_TOGGLES:
                yes = not yes
            elif event.key is Key.ENTER:
                return answer(yes)


def read_stdin_line() -> str:
    line = sys.stdin.readline()
    return line.rstrip("\r\n")


def _prompt(stream: TextIO | None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(f"    {paint(ICON_ARROW, ORANGE)} ")
    out.flush()


def text_input(
    *,
    prompt: str,
    default: str,
    context: Sequence[str] = (),
    read_line: LineReader = read_stdin_line,
    stream: TextIO | None = None,
) -> str:
    """Read one line; an empty line yields ``default``."""
    render(_frame(context, text_body(prompt, "Press Enter for default")), stream)
    _prompt(stream)
    entered = read_line()
    return entered if entered else default


def multiline_input(
    *,
    prompt: str,
    default: str,
    context: Sequence[str] = (),
    read_line: LineReader = read_stdin_line,
    stream: TextIO | None = None,
) -> str:
    """Read lines until an empty one; an empty first line yields ``default``."""
    hint = "Press Enter for default, or type lines and finish with an empty line"
    render(_frame(context, text_body(prompt, hint)), stream)

    lines: list[str] = []
    while True:
        _prompt(stream)
        entered = read_line()
        if not entered:
            break
        lines.append(entered)

    if not lines:
        return default
    return "\n".join(lines)
