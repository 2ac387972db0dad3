"""Typed configuration loading and access.

The wizard reads an optional ``appdist.toml`` from the project directory.
Every key is optional; anything missing falls back to the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DefaultsConfig",
    "PathsConfig",
    "CONFIG_FILENAME",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_FALLBACK_URL",
    "DEFAULT_TESTER_GROUPS",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "appdist.toml"

DEFAULT_DESCRIPTION = "No description provided"
DEFAULT_TESTER_GROUPS = ("qa", "qa-team", "devs")
DEFAULT_FALLBACK_URL = "https://appdistribution.firebase.google.com/testerapps"

# Environment label -> Gradle product flavor segment
DEFAULT_FLAVORS: Mapping[str, str] = {
    "Uat": "Uat",
    "Stage": "Stage",
    "Prod": "Production",
}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Paths relative to the project directory."""

    gradle: str = "./gradlew"
    notes_file: str = "app/release-notes.txt"
    webhook_file: str = ".slack-webhook"


@dataclass(frozen=True, slots=True)
class DefaultsConfig:
    """Values offered to the operator when nothing is entered."""

    description: str = DEFAULT_DESCRIPTION
    tester_groups: tuple[str, ...] = DEFAULT_TESTER_GROUPS
    fallback_url: str = DEFAULT_FALLBACK_URL


def _default_flavors() -> dict[str, str]:
    return dict(DEFAULT_FLAVORS)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    flavors: dict[str, str] = field(default_factory=_default_flavors)

    def flavor_for(self, environment: str) -> str:
        """Gradle flavor segment for an environment label."""
        return self.flavors.get(environment, environment)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        paths: StrDict = get_table(data, "paths") or {}
        defaults: StrDict = get_table(data, "defaults") or {}
        flavors: StrDict = get_table(data, "flavors") or {}

        groups = get_str_list(defaults, "tester_groups")
        if groups is not None and not groups:
            raise ValueError("defaults.tester_groups must list at least one group")

        merged_flavors = _default_flavors()
        for env in merged_flavors:
            override = get_str(flavors, env)
            if override is not None:
                merged_flavors[env] = override

        return cls(
            paths=PathsConfig(
                gradle=get_str(paths, "gradle") or "./gradlew",
                notes_file=get_str(paths, "notes_file") or "app/release-notes.txt",
                webhook_file=get_str(paths, "webhook_file") or ".slack-webhook",
            ),
            defaults=DefaultsConfig(
                description=get_str(defaults, "description") or DEFAULT_DESCRIPTION,
                tester_groups=tuple(groups) if groups else DEFAULT_TESTER_GROUPS,
                fallback_url=get_str(defaults, "fallback_url") or DEFAULT_FALLBACK_URL,
            ),
            flavors=merged_flavors,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Cannot read config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to appdist.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
