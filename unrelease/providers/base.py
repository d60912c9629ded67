"""Provider capability set.

A provider is one place a version gets published: the git tag provider
(local and remote scopes) or the npm registry provider (remote scope
only). Both expose the same three capabilities:

- ``check_requirements()``: is the tool installed and the context valid?
- ``check_existence(version, scope, requirements)``: is the version there?
- ``delete(version, scope, requirements)``: remove it.

Messages returned by providers are bare sentences; callers prefix them
with ``label(provider, scope)`` (e.g. ``git(remote): ``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Literal, Protocol

from unrelease.core.errors import RetractError
from unrelease.core.result import Result
from unrelease.core.version import Version

__all__ = [
    "PROVIDER_NAMES",
    "REQUIREMENTS_MET",
    "Existence",
    "ExistenceStatus",
    "Provider",
    "ProviderName",
    "Requirements",
    "Scope",
    "label",
]

ProviderName = Literal["git", "npm"]
PROVIDER_NAMES: tuple[ProviderName, ...] = ("git", "npm")

REQUIREMENTS_MET = "All requirements are met"


class Scope(Enum):
    LOCAL = auto()
    REMOTE = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ExistenceStatus(Enum):
    """Tri-state existence of a version on a provider."""

    MISSING = auto()
    """Nothing found (tag absent, or the package itself is unknown)."""

    VERSION_MISSING = auto()
    """The package exists but not this version (registry only)."""

    PRESENT = auto()


@dataclass(frozen=True, slots=True)
class Existence:
    """Result of an existence probe.

    Attributes:
        status: Tri-state outcome
        message: Human-readable diagnostic
        code: Exit code reported by ``exist`` for this probe
    """

    status: ExistenceStatus
    message: str
    code: int

    @property
    def present(self) -> bool:
        return self.status == ExistenceStatus.PRESENT


@dataclass(frozen=True, slots=True)
class Requirements:
    """Context resolved by a successful requirement check.

    Attributes:
        message: Diagnostic ("All requirements are met")
        manifest: Package manifest found by the registry provider
        package_name: Package the registry provider operates on
    """

    message: str = REQUIREMENTS_MET
    manifest: Path | None = None
    package_name: str | None = None


class Provider(Protocol):
    name: ProviderName
    scopes: tuple[Scope, ...]

    def check_requirements(self) -> Result[Requirements, RetractError]: ...

    def check_existence(
        self, version: Version, scope: Scope, requirements: Requirements
    ) -> Result[Existence, RetractError]: ...

    def delete(
        self, version: Version, scope: Scope, requirements: Requirements
    ) -> Result[str, RetractError]: ...


def label(provider: ProviderName, scope: Scope) -> str:
    """Message prefix for a provider scope, e.g. ``git(local): ``."""
    return f"{provider}({scope}): "
