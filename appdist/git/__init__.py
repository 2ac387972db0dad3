"""Version-control metadata."""

from .repository import (
    UNKNOWN_AUTHOR,
    UNKNOWN_BRANCH,
    GitError,
    ReleaseMetadata,
    Repository,
    release_metadata,
)

__all__ = [
    "GitError",
    "ReleaseMetadata",
    "Repository",
    "UNKNOWN_AUTHOR",
    "UNKNOWN_BRANCH",
    "release_metadata",
]
