"""Typed configuration loading.

The engine never reads the working directory or remote name from process
state; everything it needs travels in a ``RetractConfig`` value. Defaults
can be overridden by an ``unrelease.toml`` file:

    [git]
    executable = "git"
    remote = "origin"
    tag_prefix = "v"

    [npm]
    executable = "npm"
    manifest = "package.json"
    registry = "https://registry.npmjs.org/"

    [timeouts]
    git = 30
    git_network = 180
    npm = 120
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import RetractError
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "GitConfig",
    "NpmConfig",
    "RetractConfig",
    "TimeoutsConfig",
    "find_config",
    "load_config",
]

CONFIG_FILENAME = "unrelease.toml"

# Local git operations (tag -l, rev-parse, log, reset)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (ls-remote, push)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# npm view / unpublish
NPM_TIMEOUT_SECONDS = 2 * 60.0


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Tag provider settings."""

    executable: str = "git"
    remote: str = "origin"
    tag_prefix: str = "v"


@dataclass(frozen=True, slots=True)
class NpmConfig:
    """Registry provider settings.

    Attributes:
        executable: Package-manager executable name
        manifest: Manifest file name searched upward from the working directory
        registry: Registry URL passed as --registry (None uses npm's own config)
    """

    executable: str = "npm"
    manifest: str = "package.json"
    registry: str | None = None


@dataclass(frozen=True, slots=True)
class TimeoutsConfig:
    git: float = GIT_TIMEOUT_SECONDS
    git_network: float = GIT_NETWORK_TIMEOUT_SECONDS
    npm: float = NPM_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class RetractConfig:
    """Explicit execution context for one invocation."""

    cwd: Path
    git: GitConfig = field(default_factory=GitConfig)
    npm: NpmConfig = field(default_factory=NpmConfig)
    timeouts: TimeoutsConfig = field(default_factory=TimeoutsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, cwd: Path) -> RetractConfig:
        """Create a config from a parsed TOML mapping."""
        git: StrDict = get_table(data, "git") or {}
        npm: StrDict = get_table(data, "npm") or {}
        timeouts: StrDict = get_table(data, "timeouts") or {}

        # An empty prefix is meaningful (tags without "v").
        prefix = git.get("tag_prefix")

        return cls(
            cwd=cwd,
            git=GitConfig(
                executable=get_str(git, "executable") or "git",
                remote=get_str(git, "remote") or "origin",
                tag_prefix=prefix.strip() if isinstance(prefix, str) else "v",
            ),
            npm=NpmConfig(
                executable=get_str(npm, "executable") or "npm",
                manifest=get_str(npm, "manifest") or "package.json",
                registry=get_str(npm, "registry"),
            ),
            timeouts=TimeoutsConfig(
                git=get_float(timeouts, "git") or GIT_TIMEOUT_SECONDS,
                git_network=get_float(timeouts, "git_network") or GIT_NETWORK_TIMEOUT_SECONDS,
                npm=get_float(timeouts, "npm") or NPM_TIMEOUT_SECONDS,
            ),
        )


def find_config(start: Path) -> Path | None:
    """Find ``unrelease.toml`` in ``start`` or any of its parents."""
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _parse_toml(path: Path) -> Result[StrDict, RetractError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(RetractError(kind="invalid_config", message=f"config file not found: {path}"))
    except PermissionError:
        return Err(RetractError(kind="invalid_config", message=f"permission denied reading: {path}"))
    except tomllib.TOMLDecodeError as e:
        return Err(RetractError(kind="invalid_config", message=f"invalid TOML in {path}: {e}"))
    except UnicodeDecodeError as e:
        return Err(RetractError(kind="invalid_config", message=f"error reading {path}: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(RetractError(kind="invalid_config", message="config root must be a TOML table"))
    return Ok(data)


def load_config(path: Path | None, *, cwd: Path) -> Result[RetractConfig, RetractError]:
    """Load configuration for ``cwd``.

    Args:
        path: Explicit config file, or None to search upward from ``cwd``
        cwd: Working directory the engine operates in

    Returns:
        Ok(RetractConfig) (defaults when no file is found), or Err on an
        unreadable or malformed file.
    """
    if path is None:
        path = find_config(cwd)
        if path is None:
            return Ok(RetractConfig(cwd=cwd))

    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed
    return Ok(RetractConfig.from_dict(parsed.value, cwd=cwd))
