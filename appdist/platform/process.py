"""Subprocess execution with Result-based error handling.

Three flavours are provided:

- ``run``: capture stdout, used for short metadata queries (git).
- ``run_silent``: inherit the terminal, used for the build stage so Gradle
  keeps its own progress rendering.
- ``run_tee``: stream combined stdout/stderr to the terminal while keeping a
  copy for later parsing, used for the upload stage.

Usage:
    result = run_tee(["./gradlew", "appDistributionUploadUatDebug"], cwd=root)
    match result:
        case Ok(output):
            url = extract_share_url(output, fallback)
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import codecs
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from appdist.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent", "run_tee"]

_CHUNK_SIZE = 4096


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran).
        stdout: Standard output, or the combined stream for ``run_tee``.
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command attached to the current terminal.

    Returns:
        Ok(None) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


def run_tee(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    sink: TextIO | None = None,
) -> Result[str, ProcessError]:
    """Execute a command, echoing its combined output live and capturing it.

    stderr is merged into stdout. Every chunk is written to ``sink``
    (default: ``sys.stdout``) as soon as it arrives and appended to the
    capture buffer. The returned status is the child's own exit code.

    Returns:
        Ok(output) on success, Err(ProcessError) with the captured output
        in ``stdout`` on failure.
    """
    out = sink if sink is not None else sys.stdout
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    captured: list[str] = []

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    assert proc.stdout is not None
    drained = False
    try:
        with proc.stdout:
            while True:
                chunk = proc.stdout.read1(_CHUNK_SIZE)
                if not chunk:
                    break
                text = decoder.decode(chunk)
                if text:
                    captured.append(text)
                    out.write(text)
                    out.flush()
            tail = decoder.decode(b"", final=True)
            if tail:
                captured.append(tail)
                out.write(tail)
                out.flush()
        drained = True
    finally:
        # Interrupted mid-stream (Ctrl-C, broken sink): do not leave the child running
        if not drained:
            proc.terminate()
        returncode = proc.wait()

    output = "".join(captured)

    if returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=returncode, stdout=output, stderr="")
        )

    return Ok(output)
