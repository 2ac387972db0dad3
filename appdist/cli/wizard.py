"""Release wizard: collect answers, build, upload, announce.

The wizard is a strictly linear sequence of steps over a frozen
``WizardState``. Each step either advances to the next one, finishes the
run (cancel or done), or fails with a ``DistributeError`` when a Gradle
stage exits non-zero.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, TextIO

from appdist.cli.fsm import StepHandler, StepOutcome, advance, finish, run_state_machine
from appdist.cli.keys import KeyReader, read_key
from appdist.cli.render import ICON_SUCCESS, ORANGE, Frame, banner, paint, render
from appdist.cli.selector import (
    LineReader,
    SelectorOption,
    confirm,
    join_selection,
    multiline_input,
    read_stdin_line,
    select_many,
    select_one,
)
from appdist.core.config import Config
from appdist.core.result import Err, Ok, Result
from appdist.git.repository import (
    UNKNOWN_AUTHOR,
    UNKNOWN_BRANCH,
    Repository,
    release_metadata,
)
from appdist.net.http import HttpClient
from appdist.output.console import ConsoleProtocol
from appdist.services.distribute.errors import DistributeError
from appdist.services.distribute.gradle import (
    build_command,
    extract_share_url,
    run_build,
    run_upload,
    upload_command,
)
from appdist.services.distribute.model import (
    BUILD_TYPES,
    ENVIRONMENTS,
    BuildType,
    Environment,
    ReleaseInfo,
)
from appdist.services.distribute.notes import (
    first_line_preview,
    render_release_notes,
    render_summary,
    write_release_notes,
)
from appdist.services.distribute.payload import build_payload
from appdist.services.distribute.webhook import read_webhook_url, send_notification

WizardStep = Literal[
    "environment",
    "build_type",
    "description",
    "groups",
    "metadata",
    "confirm",
    "build",
    "upload",
    "notify",
]

Outcome = Literal["pending", "cancelled", "completed"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class WizardContext:
    """Collaborators and settings shared by every step."""

    project_dir: Path
    config: Config
    console: ConsoleProtocol
    http: HttpClient
    notify: bool = True
    keys: KeyReader = read_key
    read_line: LineReader = read_stdin_line
    stream: TextIO | None = None
    clock: Callable[[], datetime] = _utcnow


@dataclass(frozen=True, slots=True)
class WizardState:
    step: WizardStep = "environment"
    outcome: Outcome = "pending"
    environment: Environment = "Uat"
    build_type: BuildType = "Debug"
    description: str = ""
    groups: tuple[str, ...] = field(default_factory=tuple)
    branch: str = UNKNOWN_BRANCH
    author: str = UNKNOWN_AUTHOR
    share_url: str | None = None

    @property
    def info(self) -> ReleaseInfo:
        return ReleaseInfo(
            environment=self.environment,
            build_type=self.build_type,
            description=self.description,
            groups=self.groups,
            branch=self.branch,
            author=self.author,
        )


def _done(label: str, value: str) -> str:
    return f"  {paint(ICON_SUCCESS, ORANGE)} {label}: {value}"


def context_lines(state: WizardState) -> tuple[str, ...]:
    """Summary of the answers given before ``state.step``."""
    order: Sequence[WizardStep] = ("environment", "build_type", "description", "groups")
    reached = order.index(state.step) if state.step in order else len(order)

    lines: list[str] = []
    if reached > 0:
        lines.append(_done("Environment", state.environment))
    if reached > 1:
        lines.append(_done("Build type", state.build_type))
    if reached > 2:
        lines.append(_done("Description", first_line_preview(state.description)))
    if reached > 3:
        lines.append(_done("Groups", join_selection(state.groups)))
    return tuple(lines)


def _show(ctx: WizardContext, *body: str) -> None:
    render(Frame(banner=banner(), context=(), body=body), ctx.stream)


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------


def step_environment(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    env = select_one(
        title="Select environment",
        options=[SelectorOption(value=e, label=e) for e in ENVIRONMENTS],
        context=context_lines(state),
        keys=ctx.keys,
        stream=ctx.stream,
    )
    return Ok(advance(replace(state, step="build_type", environment=env)))


def step_build_type(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    build_type = select_one(
        title="Select build type",
        options=[SelectorOption(value=b, label=b) for b in BUILD_TYPES],
        context=context_lines(state),
        keys=ctx.keys,
        stream=ctx.stream,
    )
    return Ok(advance(replace(state, step="description", build_type=build_type)))


def step_description(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    description = multiline_input(
        prompt="Enter release description",
        default=ctx.config.defaults.description,
        context=context_lines(state),
        read_line=ctx.read_line,
        stream=ctx.stream,
    )
    return Ok(advance(replace(state, step="groups", description=description)))


def step_groups(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    groups = select_many(
        title="Select tester group(s)",
        labels=ctx.config.defaults.tester_groups,
        context=context_lines(state),
        keys=ctx.keys,
        stream=ctx.stream,
    )
    return Ok(advance(replace(state, step="metadata", groups=tuple(groups))))


def step_metadata(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    meta = release_metadata(Repository(ctx.project_dir))
    return Ok(advance(replace(state, step="confirm", branch=meta.branch, author=meta.author)))


def step_confirm(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    choice = confirm(summary=render_summary(state.info), keys=ctx.keys, stream=ctx.stream)
    if choice != "yes":
        _show(ctx, f"  {paint('Build cancelled.', ORANGE)}", "")
        return Ok(finish(replace(state, outcome="cancelled")))
    return Ok(advance(replace(state, step="build")))


def step_build(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    _show(ctx)
    ctx.console.header("Building & Uploading")
    ctx.console.newline()

    notes_path = ctx.project_dir / ctx.config.paths.notes_file
    written = write_release_notes(path=notes_path, text=render_release_notes(state.info))
    if isinstance(written, Err):
        ctx.console.warning(written.error.message)
    else:
        ctx.console.success(f"Release notes saved ({ctx.config.paths.notes_file})")
    ctx.console.newline()

    cmd = build_command(config=ctx.config, info=state.info)
    ctx.console.info(f"Running {' '.join(cmd)}")
    ctx.console.newline()

    built = run_build(project_dir=ctx.project_dir, config=ctx.config, info=state.info)
    if isinstance(built, Err):
        return built

    ctx.console.newline()
    ctx.console.success("Build successful")
    return Ok(advance(replace(state, step="upload")))


def step_upload(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    notes = render_release_notes(state.info)
    cmd = upload_command(config=ctx.config, info=state.info, notes=notes)
    ctx.console.newline()
    ctx.console.info(f"Running {cmd[0]} {cmd[1]}")
    ctx.console.newline()

    uploaded = run_upload(
        project_dir=ctx.project_dir,
        config=ctx.config,
        info=state.info,
        notes=notes,
        sink=ctx.stream,
    )
    if isinstance(uploaded, Err):
        return uploaded

    fallback = ctx.config.defaults.fallback_url
    url = extract_share_url(uploaded.value, fallback=fallback)
    ctx.console.newline()
    ctx.console.header("Upload complete!")
    if url == fallback:
        ctx.console.warning("tester link not found in upload output, using fallback URL")
    ctx.console.print(f"  {url}")
    return Ok(advance(replace(state, step="notify", share_url=url)))


def step_notify(
    ctx: WizardContext, state: WizardState
) -> Result[StepOutcome[WizardState], DistributeError]:
    done = replace(state, outcome="completed")
    if not ctx.notify:
        ctx.console.info("Slack notification skipped")
        return Ok(finish(done))

    webhook = read_webhook_url(ctx.project_dir / ctx.config.paths.webhook_file)
    if isinstance(webhook, Err):
        ctx.console.warning(webhook.error.message)
        return Ok(finish(done))

    payload = build_payload(
        info=state.info,
        url=state.share_url or ctx.config.defaults.fallback_url,
        now=ctx.clock(),
    )
    sent = send_notification(client=ctx.http, url=webhook.value, payload=payload)
    if isinstance(sent, Err):
        ctx.console.warning(sent.error.message)
    else:
        ctx.console.success("Slack notification sent")
    return Ok(finish(done))


WizardStepFn = Callable[
    [WizardContext, WizardState], Result[StepOutcome[WizardState], DistributeError]
]

_STEPS: dict[WizardStep, WizardStepFn] = {
    "environment": step_environment,
    "build_type": step_build_type,
    "description": step_description,
    "groups": step_groups,
    "metadata": step_metadata,
    "confirm": step_confirm,
    "build": step_build,
    "upload": step_upload,
    "notify": step_notify,
}


def run_wizard(ctx: WizardContext) -> Result[WizardState, DistributeError]:
    """Run every step from the first one."""

    def bind(step: WizardStepFn) -> StepHandler[WizardState]:
        return lambda state: step(ctx, state)

    return run_state_machine(
        initial_state=WizardState(),
        get_step=lambda s: s.step,
        handlers={name: bind(step) for name, step in _STEPS.items()},
    )
