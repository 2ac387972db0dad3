from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Environment = Literal["Uat", "Stage", "Prod"]
BuildType = Literal["Debug", "Release"]

ENVIRONMENTS: tuple[Environment, ...] = ("Uat", "Stage", "Prod")
BUILD_TYPES: tuple[BuildType, ...] = ("Debug", "Release")


def variant_name(environment: Environment, build_type: BuildType) -> str:
    """Display name of a build variant, e.g. ``StageRelease``."""
    return f"{environment}{build_type}"


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    """Everything the operator chose plus the version-control metadata."""

    environment: Environment
    build_type: BuildType
    description: str
    groups: tuple[str, ...]
    branch: str
    author: str

    @property
    def variant(self) -> str:
        return variant_name(self.environment, self.build_type)

    @property
    def groups_csv(self) -> str:
        """Groups joined the way the upload task and notes expect them."""
        return ", ".join(self.groups)

    @property
    def groups_param(self) -> str:
        """Groups as the distribution plugin's ``--groups`` value (no spaces)."""
        return ",".join(self.groups)
