from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DistributeErrorKind = Literal[
    "no_tty",
    "invalid_config",
    "build_failed",
    "upload_failed",
    "notes_write_failed",
    "webhook_missing",
    "webhook_failed",
    "invalid_input",
]


@dataclass(frozen=True, slots=True)
class DistributeError:
    kind: DistributeErrorKind
    message: str
    hint: str | None = None
