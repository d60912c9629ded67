"""npm registry access through the npm CLI."""

from __future__ import annotations

from pathlib import Path

from unrelease.core.config import NpmConfig, TimeoutsConfig
from unrelease.core.result import Err, Ok, Result
from unrelease.platform.process import CommandRunner, ProcessError, run_checked

__all__ = ["NpmRegistry", "package_spec"]


def package_spec(name: str, version: str) -> str:
    return f"{name}@{version}"


class NpmRegistry:
    """Queries and unpublishes package versions.

    Attributes:
        cwd: Directory npm runs in (its .npmrc applies)
    """

    def __init__(
        self,
        cwd: Path,
        *,
        runner: CommandRunner,
        config: NpmConfig | None = None,
        timeouts: TimeoutsConfig | None = None,
    ) -> None:
        self.cwd = cwd
        self._runner = runner
        self._config = config or NpmConfig()
        self._timeouts = timeouts or TimeoutsConfig()

    @property
    def executable(self) -> str:
        return self._config.executable

    def is_available(self) -> bool:
        return self._runner.which(self._config.executable) is not None

    def view_version(self, spec: str) -> Result[str, ProcessError]:
        """Return the published version matching ``spec``.

        Ok("") means the package exists but no version matches; Err means
        the lookup failed (typically E404 for an unknown package).
        """
        result = self._run(["view", spec, "version"])
        if isinstance(result, Err):
            return result
        return Ok(result.value.strip())

    def unpublish(self, spec: str) -> Result[None, ProcessError]:
        result = self._run(["unpublish", "--force", spec])
        if isinstance(result, Err):
            return result
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        cmd = [self._config.executable, *args]
        if self._config.registry:
            cmd += ["--registry", self._config.registry]
        return run_checked(self._runner, cmd, cwd=self.cwd, timeout=self._timeouts.npm)
