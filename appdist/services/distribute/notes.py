from __future__ import annotations

from pathlib import Path

from appdist.core.result import Err, Ok, Result
from appdist.services.distribute.errors import DistributeError
from appdist.services.distribute.model import ReleaseInfo

_SUMMARY_LABEL_WIDTH = 13


def first_line_preview(text: str) -> str:
    """First line of ``text``, with ``...`` appended when more lines follow."""
    lines = text.split("\n")
    if len(lines) > 1:
        return f"{lines[0]}..."
    return text


def render_release_notes(info: ReleaseInfo) -> str:
    lines = [
        f"Environment: {info.variant}",
        f"Branch: {info.branch}",
        f"Author: {info.author}",
        f"Groups: {info.groups_csv}",
        "Description:",
        info.description,
    ]
    return "\n".join(lines)


def render_summary(info: ReleaseInfo) -> list[str]:
    """Label/value lines shown in the confirmation dialog."""
    rows = [
        ("Environment", info.environment),
        ("Build Type", info.build_type),
        ("Groups", info.groups_csv),
        ("Branch", info.branch),
        ("Author", info.author),
    ]
    lines = [f"{label.ljust(_SUMMARY_LABEL_WIDTH)}{value}" for label, value in rows]

    desc_lines = info.description.split("\n")
    lines.append(f"{'Description'.ljust(_SUMMARY_LABEL_WIDTH)}{desc_lines[0]}")
    for extra in desc_lines[1:]:
        lines.append(f"{'':{_SUMMARY_LABEL_WIDTH}}{extra}")
    return lines


def write_release_notes(*, path: Path, text: str) -> Result[Path, DistributeError]:
    """Write the audit copy of the release notes."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text.rstrip("\n") + "\n", encoding="utf-8")
    except OSError as e:
        return Err(
            DistributeError(
                kind="notes_write_failed",
                message=f"failed to write release notes: {e}",
                hint=str(path),
            )
        )
    return Ok(path)
