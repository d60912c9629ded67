"""npm registry provider (remote scope only)."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from unrelease.core.config import RetractConfig
from unrelease.core.errors import RetractError
from unrelease.core.result import Err, Ok, Result
from unrelease.core.version import Version
from unrelease.npm.manifest import find_manifest, read_package_name
from unrelease.npm.registry import NpmRegistry, package_spec
from unrelease.platform.process import CommandRunner
from unrelease.providers.base import (
    Existence,
    ExistenceStatus,
    ProviderName,
    Requirements,
    Scope,
)

__all__ = ["RegistryProvider"]


class RegistryProvider:
    """Package versions published on the npm registry.

    The registry has no local copy of a version, so the only scope is
    ``Scope.REMOTE``. The package name comes from ``package_name`` when
    given, otherwise from the nearest manifest above ``search_from``.
    """

    name: ClassVar[ProviderName] = "npm"
    scopes: ClassVar[tuple[Scope, ...]] = (Scope.REMOTE,)

    def __init__(
        self,
        registry: NpmRegistry,
        *,
        search_from: Path,
        manifest_name: str = "package.json",
        package_name: str | None = None,
    ) -> None:
        self.registry = registry
        self.search_from = search_from
        self.manifest_name = manifest_name
        self.package_name = package_name

    @classmethod
    def from_config(
        cls,
        config: RetractConfig,
        runner: CommandRunner,
        *,
        package_name: str | None = None,
    ) -> RegistryProvider:
        registry = NpmRegistry(config.cwd, runner=runner, config=config.npm, timeouts=config.timeouts)
        return cls(
            registry,
            search_from=config.cwd,
            manifest_name=config.npm.manifest,
            package_name=package_name,
        )

    def check_requirements(self) -> Result[Requirements, RetractError]:
        if not self.registry.is_available():
            return Err(
                RetractError(
                    kind="tool_missing",
                    message=f"{self.registry.executable} is required but was not found",
                    hint="Install Node.js (ships with npm): https://nodejs.org/",
                )
            )

        # An explicit package name makes the manifest unnecessary.
        if self.package_name:
            return Ok(Requirements(package_name=self.package_name))

        manifest = find_manifest(self.search_from, self.manifest_name)
        if manifest is None:
            return Err(
                RetractError(
                    kind="manifest_not_found",
                    message=(
                        f"the file {self.manifest_name} does not exist in {self.search_from} "
                        "or in any parent directory"
                    ),
                    hint="Run from the package directory or pass --npm-package-name.",
                )
            )

        name = read_package_name(manifest)
        if isinstance(name, Err):
            return name
        return Ok(Requirements(manifest=manifest, package_name=name.value))

    def check_existence(
        self, version: Version, scope: Scope, requirements: Requirements
    ) -> Result[Existence, RetractError]:
        _require_remote(scope)
        name = _package_name(requirements)
        spec = package_spec(name, str(version))

        found = self.registry.view_version(spec)
        if isinstance(found, Err):
            return Ok(Existence(ExistenceStatus.MISSING, f"The package {name} does not exist", 2))
        if not found.value:
            return Ok(
                Existence(ExistenceStatus.VERSION_MISSING, f"The version {version} does not exist", 1)
            )
        return Ok(Existence(ExistenceStatus.PRESENT, f"{spec} does exist", 0))

    def delete(
        self, version: Version, scope: Scope, requirements: Requirements
    ) -> Result[str, RetractError]:
        _require_remote(scope)
        spec = package_spec(_package_name(requirements), str(version))

        unpublished = self.registry.unpublish(spec)
        if isinstance(unpublished, Err):
            return Err(
                RetractError(
                    kind="command_failed",
                    message=f"An error occurred while unpublishing {spec}: {unpublished.error.describe()}",
                )
            )
        return Ok(f"The package {spec} has been unpublished")


def _require_remote(scope: Scope) -> None:
    if scope != Scope.REMOTE:
        raise AssertionError(f"npm has no {scope} scope")


def _package_name(requirements: Requirements) -> str:
    if requirements.package_name is None:
        raise AssertionError("registry requirements carry no package name")
    return requirements.package_name
