from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import appdist.cli.app as app_mod
from appdist import __version__
from appdist.cli.app import app
from appdist.cli.wizard import WizardContext, WizardState
from appdist.core.result import Err, Ok, Result
from appdist.services.distribute.errors import DistributeError

runner = CliRunner()


def _tty_ok() -> Result[None, DistributeError]:
    return Ok(None)


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_missing_project_dir_is_env_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--project-dir", str(tmp_path / "nope")])

    assert result.exit_code == 2


def test_invalid_config_is_env_error(tmp_path: Path) -> None:
    (tmp_path / "appdist.toml").write_text("[paths\ngradle = ", encoding="utf-8")

    result = runner.invoke(app, ["--project-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "Invalid TOML syntax" in result.output


def test_config_directory_is_env_error(tmp_path: Path) -> None:
    (tmp_path / "appdist.toml").mkdir()

    result = runner.invoke(app, ["-C", str(tmp_path)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, OSError)


def test_config_option_pointing_at_directory_is_env_error(tmp_path: Path) -> None:
    cfg = tmp_path / "conf"
    cfg.mkdir()

    result = runner.invoke(app, ["-C", str(tmp_path), "--config", str(cfg)])

    assert result.exit_code == 2


def test_without_tty_fails_fast(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def never(_: WizardContext) -> Result[WizardState, DistributeError]:
        raise AssertionError("wizard must not start without a terminal")

    monkeypatch.setattr(app_mod, "run_wizard", never)

    result = runner.invoke(app, ["--project-dir", str(tmp_path)])

    assert result.exit_code == 2
    assert "requires a terminal" in result.output


def test_stage_failure_exits_one(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(_: WizardContext) -> Result[WizardState, DistributeError]:
        return Err(DistributeError(kind="build_failed", message="Build failed (exit 1)"))

    monkeypatch.setattr(app_mod, "require_tty", _tty_ok)
    monkeypatch.setattr(app_mod, "run_wizard", failing)

    result = runner.invoke(app, ["--project-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert "Build failed (exit 1)" in result.output


def test_completed_run_exits_zero(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[WizardContext] = []

    def completed(ctx: WizardContext) -> Result[WizardState, DistributeError]:
        seen.append(ctx)
        return Ok(WizardState(step="notify", outcome="completed"))

    monkeypatch.setattr(app_mod, "require_tty", _tty_ok)
    monkeypatch.setattr(app_mod, "run_wizard", completed)

    result = runner.invoke(app, ["--project-dir", str(tmp_path), "--no-notify"])

    assert result.exit_code == 0
    assert seen[0].project_dir == tmp_path.resolve()
    assert seen[0].notify is False


def test_cancelled_run_exits_zero(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def cancelled(_: WizardContext) -> Result[WizardState, DistributeError]:
        return Ok(WizardState(step="confirm", outcome="cancelled"))

    monkeypatch.setattr(app_mod, "require_tty", _tty_ok)
    monkeypatch.setattr(app_mod, "run_wizard", cancelled)

    result = runner.invoke(app, ["--project-dir", str(tmp_path)])

    assert result.exit_code == 0


def test_interrupt_exits_130(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted(_: WizardContext) -> Result[WizardState, DistributeError]:
        raise KeyboardInterrupt

    monkeypatch.setattr(app_mod, "require_tty", _tty_ok)
    monkeypatch.setattr(app_mod, "run_wizard", interrupted)

    result = runner.invoke(app, ["--project-dir", str(tmp_path)])

    assert result.exit_code == 130
    assert "Interrupted" in result.output


def test_explicit_config_path_is_used(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "custom.toml"
    cfg.write_text('[paths]\ngradle = "gradle"\n', encoding="utf-8")
    seen: list[WizardContext] = []

    def completed(ctx: WizardContext) -> Result[WizardState, DistributeError]:
        seen.append(ctx)
        return Ok(WizardState(outcome="completed"))

    monkeypatch.setattr(app_mod, "require_tty", _tty_ok)
    monkeypatch.setattr(app_mod, "run_wizard", completed)

    result = runner.invoke(app, ["--project-dir", str(tmp_path), "--config", str(cfg)])

    assert result.exit_code == 0
    assert seen[0].config.paths.gradle == "gradle"
