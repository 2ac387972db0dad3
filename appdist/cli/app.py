from __future__ import annotations

from pathlib import Path

import typer

from appdist import __version__
from appdist.cli.context import build_context
from appdist.cli.keys import require_tty
from appdist.cli.wizard import run_wizard
from appdist.core.errors import ErrorCode
from appdist.core.result import Err
from appdist.output.errors import distribute_error_exit_code, print_distribute_error

_INTERRUPTED_EXIT = 130

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)


@app.command()
def distribute(
    project_dir: Path = typer.Option(
        Path("."),
        "--project-dir",
        "-C",
        help="Android project root (contains gradlew).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: appdist.toml in the project directory).",
    ),
    no_notify: bool = typer.Option(False, "--no-notify", help="Skip the Slack notification."),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Build, upload and announce an App Distribution release."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    ctx = build_context(project_dir=project_dir, config_path=config, notify=not no_notify)

    tty = require_tty()
    if isinstance(tty, Err):
        print_distribute_error(tty.error, ctx.console)
        raise typer.Exit(code=distribute_error_exit_code(tty.error))

    try:
        result = run_wizard(ctx)
    except KeyboardInterrupt:
        ctx.console.newline()
        ctx.console.error("Interrupted")
        raise typer.Exit(code=_INTERRUPTED_EXIT)

    if isinstance(result, Err):
        print_distribute_error(result.error, ctx.console)
        raise typer.Exit(code=distribute_error_exit_code(result.error))

    raise typer.Exit(code=int(ErrorCode.OK))


def main() -> None:
    app()
