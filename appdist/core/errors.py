"""Exit codes for the wizard process.

The values are returned to the shell and should remain stable:
- 0: Success, including a release cancelled by the operator
- 1: A Gradle stage (build or upload) failed
- 2: Environment error (no terminal attached, unreadable config)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes."""

    OK = 0
    STAGE_FAILED = 1
    ENV_ERROR = 2
