"""Git metadata for release notes.

The wizard only needs two facts from version control: the current branch
and the configured author name. Both lookups return ``Result`` so callers
can decide how to degrade; ``release_metadata`` applies the placeholders
used in notes and notifications.

Usage:
    repo = Repository(Path.cwd())
    match repo.current_branch():
        case Ok(branch):
            print(f"Branch: {branch}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from appdist.core.result import Err, Ok, Result
from appdist.platform.process import ProcessError
from appdist.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 10.0

UNKNOWN_BRANCH = "unknown"
UNKNOWN_AUTHOR = "Unknown Author"

__all__ = [
    "GitError",
    "ReleaseMetadata",
    "Repository",
    "UNKNOWN_AUTHOR",
    "UNKNOWN_BRANCH",
    "release_metadata",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class ReleaseMetadata:
    branch: str
    author: str


class Repository:
    """Read-only view of a git working tree.

    Attributes:
        path: Any directory inside the working tree
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def current_branch(self) -> Result[str, GitError]:
        """Get the current branch name (``HEAD`` when detached)."""
        return self._query("rev-parse", ["rev-parse", "--abbrev-ref", "HEAD"])

    def author_name(self) -> Result[str, GitError]:
        """Get ``user.name`` from git config."""
        return self._query("config user.name", ["config", "user.name"])

    def _query(self, command: str, args: list[str]) -> Result[str, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=command,
                        message=e.stderr.strip() or f"git {command} failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                value = stdout.strip()
                if not value:
                    return Err(GitError(command=command, message="empty output"))
                return Ok(value)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=_GIT_TIMEOUT_SECONDS
        )


def release_metadata(repo: Repository) -> ReleaseMetadata:
    """Branch and author, with placeholders for anything git cannot answer."""
    return ReleaseMetadata(
        branch=repo.current_branch().unwrap_or(UNKNOWN_BRANCH),
        author=repo.author_name().unwrap_or(UNKNOWN_AUTHOR),
    )
