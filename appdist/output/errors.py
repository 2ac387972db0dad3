"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from appdist.core.errors import ErrorCode
from appdist.output.console import Style
from appdist.services.distribute.errors import DistributeError

if TYPE_CHECKING:
    from appdist.output.console import ConsoleProtocol

__all__ = ["print_distribute_error", "distribute_error_exit_code"]


def print_distribute_error(error: DistributeError, console: ConsoleProtocol) -> None:
    """Print a wizard error in red, with its hint dimmed underneath."""
    console.newline()
    console.error(error.message)
    if error.hint:
        console.print(f"    hint: {error.hint}", Style.DIM)


def distribute_error_exit_code(error: DistributeError) -> int:
    match error.kind:
        case "build_failed" | "upload_failed":
            return int(ErrorCode.STAGE_FAILED)
        case "no_tty" | "invalid_config" | "notes_write_failed" | "invalid_input":
            return int(ErrorCode.ENV_ERROR)
        case "webhook_missing" | "webhook_failed":
            return int(ErrorCode.OK)
        case unreachable:
            assert_never(unreachable)
