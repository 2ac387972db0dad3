from __future__ import annotations

from pathlib import Path

from appdist.core.result import Err, Ok
from appdist.services.distribute.model import ReleaseInfo, variant_name
from appdist.services.distribute.notes import (
    first_line_preview,
    render_release_notes,
    render_summary,
    write_release_notes,
)


def _info(**overrides: object) -> ReleaseInfo:
    values: dict[str, object] = {
        "environment": "Stage",
        "build_type": "Release",
        "description": "Fixed crash\nImproved startup",
        "groups": ("qa", "devs"),
        "branch": "main",
        "author": "Jane Doe",
    }
    values.update(overrides)
    return ReleaseInfo(**values)  # type: ignore[arg-type]


def test_variant_name() -> None:
    assert variant_name("Uat", "Debug") == "UatDebug"
    assert _info().variant == "StageRelease"


def test_group_joins() -> None:
    info = _info(groups=("qa", "qa-team", "devs"))
    assert info.groups_csv == "qa, qa-team, devs"
    assert info.groups_param == "qa,qa-team,devs"


def test_release_notes_document() -> None:
    notes = render_release_notes(_info())

    assert "Environment: StageRelease" in notes
    assert "Groups: qa, devs" in notes
    assert "Branch: main" in notes
    assert "Author: Jane Doe" in notes
    lines = notes.splitlines()
    start = lines.index("Description:")
    assert lines[start + 1 : start + 3] == ["Fixed crash", "Improved startup"]


def test_release_notes_with_placeholders() -> None:
    notes = render_release_notes(_info(branch="unknown", author="Unknown Author"))

    assert "Branch: unknown" in notes
    assert "Author: Unknown Author" in notes


def test_first_line_preview() -> None:
    assert first_line_preview("Fixed crash\nImproved startup") == "Fixed crash..."
    assert first_line_preview("Single line") == "Single line"
    assert first_line_preview("") == ""


def test_summary_lines() -> None:
    lines = render_summary(_info())

    assert lines[0] == "Environment  Stage"
    assert "Build Type   Release" in lines
    assert "Groups       qa, devs" in lines
    assert "Branch       main" in lines
    assert "Author       Jane Doe" in lines
    assert lines[-2:] == ["Description  Fixed crash", "             Improved startup"]


def test_write_release_notes(tmp_path: Path) -> None:
    path = tmp_path / "app" / "release-notes.txt"

    result = write_release_notes(path=path, text="Environment: UatDebug")

    assert result == Ok(path)
    assert path.read_text(encoding="utf-8") == "Environment: UatDebug\n"


def test_write_release_notes_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "app"
    blocker.write_text("not a directory")

    result = write_release_notes(path=blocker / "release-notes.txt", text="x")

    assert isinstance(result, Err)
    assert result.error.kind == "notes_write_failed"
