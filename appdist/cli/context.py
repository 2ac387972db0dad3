from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from appdist.cli.wizard import WizardContext
from appdist.core.config import CONFIG_FILENAME, load_config_or_default
from appdist.core.result import Err
from appdist.net.http import RealHttpClient
from appdist.output.console import ConsoleProtocol, RichConsole
from appdist.output.errors import distribute_error_exit_code, print_distribute_error
from appdist.services.distribute.errors import DistributeError


def _fail(console: ConsoleProtocol, message: str, hint: str | None = None) -> NoReturn:
    error = DistributeError(kind="invalid_config", message=message, hint=hint)
    print_distribute_error(error, console)
    raise typer.Exit(code=distribute_error_exit_code(error))


def build_context(
    *, project_dir: Path, config_path: Path | None, notify: bool
) -> WizardContext:
    """Resolve the project directory and load its configuration.

    Exits with ENV_ERROR when the directory is missing or the config file
    exists but cannot be read or parsed.
    """
    console = RichConsole()
    try:
        root = project_dir.expanduser().resolve()
    except OSError as e:
        _fail(console, f"invalid --project-dir: {e}")

    if not root.is_dir():
        _fail(
            console,
            f"project directory not found: {root}",
            "pass the Android project root with -C",
        )

    path = config_path if config_path is not None else root / CONFIG_FILENAME
    config_result = load_config_or_default(path)
    if isinstance(config_result, Err):
        _fail(console, config_result.error.message, str(path))

    return WizardContext(
        project_dir=root,
        config=config_result.value,
        console=console,
        http=RealHttpClient(),
        notify=notify,
    )
