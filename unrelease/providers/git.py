"""Git tag provider (local and remote scopes)."""

from __future__ import annotations

from typing import ClassVar

from unrelease.core.config import RetractConfig
from unrelease.core.errors import RetractError
from unrelease.core.result import Err, Ok, Result
from unrelease.core.version import Version
from unrelease.git.repository import GitError, Repository
from unrelease.platform.process import CommandRunner
from unrelease.providers.base import (
    Existence,
    ExistenceStatus,
    ProviderName,
    Requirements,
    Scope,
)

__all__ = ["TagProvider"]


class TagProvider:
    """Version tags in a git repository and on its remote.

    A version ``1.2.3`` is published as the tag ``<prefix>1.2.3``
    (``v1.2.3`` by default).
    """

    name: ClassVar[ProviderName] = "git"
    scopes: ClassVar[tuple[Scope, ...]] = (Scope.LOCAL, Scope.REMOTE)

    def __init__(self, repository: Repository, *, remote: str = "origin", tag_prefix: str = "v") -> None:
        self.repository = repository
        self.remote = remote
        self.tag_prefix = tag_prefix

    @classmethod
    def from_config(cls, config: RetractConfig, runner: CommandRunner) -> TagProvider:
        repo = Repository(config.cwd, runner=runner, config=config.git, timeouts=config.timeouts)
        return cls(repo, remote=config.git.remote, tag_prefix=config.git.tag_prefix)

    def tag_for(self, version: Version) -> str:
        return version.to_tag(self.tag_prefix)

    def check_requirements(self) -> Result[Requirements, RetractError]:
        if not self.repository.is_available():
            return Err(
                RetractError(
                    kind="tool_missing",
                    message=f"{self.repository.executable} is required but was not found",
                    hint="Install git: https://git-scm.com/downloads",
                )
            )
        if not self.repository.is_inside_work_tree():
            return Err(
                RetractError(
                    kind="not_a_repository",
                    message=f"{self.repository.path} is not inside a git repository",
                )
            )
        return Ok(Requirements())

    def check_existence(
        self, version: Version, scope: Scope, requirements: Requirements | None = None
    ) -> Result[Existence, RetractError]:
        tag = self.tag_for(version)
        match scope:
            case Scope.LOCAL:
                found = self.repository.has_local_tag(tag)
            case Scope.REMOTE:
                found = self.repository.has_remote_tag(self.remote, tag)

        if isinstance(found, Err):
            return Err(_command_failed(found.error))
        if found.value:
            return Ok(Existence(ExistenceStatus.PRESENT, f"The tag {tag} does exist", 0))
        return Ok(Existence(ExistenceStatus.MISSING, f"The tag {tag} does not exist", 1))

    def delete(
        self, version: Version, scope: Scope, requirements: Requirements | None = None
    ) -> Result[str, RetractError]:
        tag = self.tag_for(version)
        match scope:
            case Scope.LOCAL:
                deleted = self.repository.delete_local_tag(tag)
            case Scope.REMOTE:
                deleted = self.repository.delete_remote_tag(self.remote, tag)

        if isinstance(deleted, Err):
            return Err(_command_failed(deleted.error))
        return Ok(f"The tag {tag} has been deleted")


def _command_failed(error: GitError) -> RetractError:
    return RetractError(kind="command_failed", message=error.describe())
