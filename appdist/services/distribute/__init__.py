"""Build, upload and announce an App Distribution release."""

from .errors import DistributeError
from .model import BUILD_TYPES, ENVIRONMENTS, BuildType, Environment, ReleaseInfo, variant_name

__all__ = [
    "BUILD_TYPES",
    "BuildType",
    "DistributeError",
    "ENVIRONMENTS",
    "Environment",
    "ReleaseInfo",
    "variant_name",
]
