from __future__ import annotations

import re
from pathlib import Path
from typing import TextIO

from appdist.core.config import Config
from appdist.core.result import Err, Ok, Result
from appdist.platform.process import run_silent, run_tee
from appdist.services.distribute.errors import DistributeError
from appdist.services.distribute.model import BuildType, Environment, ReleaseInfo

SHARE_MARKER = "Share this release with testers who have access:"

_SHARE_LINE = re.compile(re.escape(SHARE_MARKER) + r"\s*(\S+)")


def gradle_variant(*, config: Config, environment: Environment, build_type: BuildType) -> str:
    """Task suffix for a variant: configured flavor segment + build type."""
    return f"{config.flavor_for(environment)}{build_type}"


def build_command(*, config: Config, info: ReleaseInfo) -> list[str]:
    variant = gradle_variant(
        config=config, environment=info.environment, build_type=info.build_type
    )
    return [config.paths.gradle, f"assemble{variant}"]


def upload_command(*, config: Config, info: ReleaseInfo, notes: str) -> list[str]:
    variant = gradle_variant(
        config=config, environment=info.environment, build_type=info.build_type
    )
    return [
        config.paths.gradle,
        f"appDistributionUpload{variant}",
        f"--releaseNotes={notes}",
        f"--groups={info.groups_param}",
    ]


def run_build(
    *, project_dir: Path, config: Config, info: ReleaseInfo
) -> Result[None, DistributeError]:
    cmd = build_command(config=config, info=info)
    result = run_silent(cmd, cwd=project_dir)
    if isinstance(result, Err):
        return Err(
            DistributeError(
                kind="build_failed",
                message=f"Build failed (exit {result.error.returncode})",
                hint=result.error.stderr or None,
            )
        )
    return Ok(None)


def run_upload(
    *,
    project_dir: Path,
    config: Config,
    info: ReleaseInfo,
    notes: str,
    sink: TextIO | None = None,
) -> Result[str, DistributeError]:
    """Run the upload task and return its combined output."""
    cmd = upload_command(config=config, info=info, notes=notes)
    result = run_tee(cmd, cwd=project_dir, sink=sink)
    if isinstance(result, Err):
        return Err(
            DistributeError(
                kind="upload_failed",
                message=f"Upload failed (exit {result.error.returncode})",
                hint=result.error.stderr or None,
            )
        )
    return Ok(result.value)


def extract_share_url(output: str, *, fallback: str) -> str:
    """Tester link printed by the upload task, or ``fallback``."""
    for line in output.splitlines():
        m = _SHARE_LINE.search(line)
        if m is not None:
            return m.group(1).rstrip("\r")
    return fallback
