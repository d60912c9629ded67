"""Version retraction.

``retract`` removes a version from the selected providers in a fixed
order:

1. requirement checks for every selected provider; the first failure
   aborts before anything is touched,
2. git: local tag (optionally discarding its release commit), then the
   remote tag,
3. npm: unpublish ``<package>@<version>``.

A version that is not found, or a remote action not confirmed with
``force_online``, is reported and skipped. A failing git/npm invocation
stops the run; what was already done stays done and is reported.

The engine assumes exclusive use of the repository and manifest for the
duration of a run; it does not coordinate with concurrent invocations.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from unrelease.core.errors import ErrorCode, RetractError, error_code
from unrelease.core.result import Err, Ok, Result
from unrelease.core.version import Version
from unrelease.npm.registry import package_spec
from unrelease.providers.base import Provider, Requirements, Scope, label
from unrelease.providers.git import TagProvider
from unrelease.providers.npm import RegistryProvider
from unrelease.services.discard import discard_release_commit, resolve_tag_commit

__all__ = ["FORCE_ONLINE_FLAG", "RetractOptions", "RetractionOutcome", "retract"]

FORCE_ONLINE_FLAG = "--force-online"


@dataclass(frozen=True, slots=True)
class RetractOptions:
    """Caller switches for one retraction.

    Attributes:
        force_online: Confirms remote/irreversible actions (remote tag, unpublish)
        discard_commit: Also discard the release commit behind the local tag
        check_existence_first: Skip deletions of versions that are not found
    """

    force_online: bool = False
    discard_commit: bool = False
    check_existence_first: bool = True


@dataclass(frozen=True, slots=True)
class RetractionOutcome:
    succeeded: bool
    code: int
    messages: tuple[str, ...]


class _Log:
    """Ordered outcome messages of one run."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def add(self, provider: Provider, scope: Scope, text: str) -> None:
        self.messages.append(label(provider.name, scope) + text)

    def failed(self, provider: Provider, scope: Scope, error: RetractError) -> RetractionOutcome:
        self.add(provider, scope, error.message)
        return RetractionOutcome(
            succeeded=False,
            code=int(error_code(error.kind)),
            messages=tuple(self.messages),
        )


def retract(
    version: Version,
    providers: Sequence[Provider],
    options: RetractOptions = RetractOptions(),
) -> RetractionOutcome:
    """Retract ``version`` from ``providers`` (git before npm, whatever the order given)."""
    tags = next((p for p in providers if isinstance(p, TagProvider)), None)
    registry = next((p for p in providers if isinstance(p, RegistryProvider)), None)
    selected: list[Provider] = [p for p in (tags, registry) if p is not None]

    requirements: dict[str, Requirements] = {}
    for provider in selected:
        checked = provider.check_requirements()
        if isinstance(checked, Err):
            return _Log().failed(provider, Scope.LOCAL, checked.error)
        requirements[provider.name] = checked.value

    log = _Log()

    if tags is not None:
        tag_requirements = requirements[tags.name]
        for scope, step in ((Scope.LOCAL, _retract_local_tag), (Scope.REMOTE, _retract_remote_tag)):
            done = step(tags, version, tag_requirements, options, log)
            if isinstance(done, Err):
                return log.failed(tags, scope, done.error)

    if registry is not None:
        done = _retract_package(registry, version, requirements[registry.name], options, log)
        if isinstance(done, Err):
            return log.failed(registry, Scope.REMOTE, done.error)

    return RetractionOutcome(succeeded=True, code=int(ErrorCode.OK), messages=tuple(log.messages))


def _should_delete(
    provider: Provider,
    version: Version,
    scope: Scope,
    requirements: Requirements,
    options: RetractOptions,
    log: _Log,
) -> Result[bool, RetractError]:
    if not options.check_existence_first:
        return Ok(True)

    existence = provider.check_existence(version, scope, requirements)
    if isinstance(existence, Err):
        return existence
    if not existence.value.present:
        log.add(provider, scope, existence.value.message)
        return Ok(False)
    return Ok(True)


def _retract_local_tag(
    provider: TagProvider,
    version: Version,
    requirements: Requirements,
    options: RetractOptions,
    log: _Log,
) -> Result[None, RetractError]:
    proceed = _should_delete(provider, version, Scope.LOCAL, requirements, options, log)
    if isinstance(proceed, Err):
        return proceed
    if not proceed.value:
        return Ok(None)

    tag = provider.tag_for(version)
    commit: str | None = None
    if options.discard_commit:
        resolved = resolve_tag_commit(provider.repository, tag)
        if isinstance(resolved, Err):
            return resolved
        commit = resolved.value

    deleted = provider.delete(version, Scope.LOCAL, requirements)
    if isinstance(deleted, Err):
        return deleted
    log.add(provider, Scope.LOCAL, deleted.value)

    if commit is None:
        return Ok(None)

    decision = discard_release_commit(provider.repository, commit, version, tag=tag)
    if isinstance(decision, Err):
        return decision
    log.add(provider, Scope.LOCAL, decision.value.reason)
    return Ok(None)


def _retract_remote_tag(
    provider: TagProvider,
    version: Version,
    requirements: Requirements,
    options: RetractOptions,
    log: _Log,
) -> Result[None, RetractError]:
    proceed = _should_delete(provider, version, Scope.REMOTE, requirements, options, log)
    if isinstance(proceed, Err):
        return proceed
    if not proceed.value:
        return Ok(None)

    if not options.force_online:
        tag = provider.tag_for(version)
        log.add(provider, Scope.REMOTE, f"To delete the tag {tag} you need to specify {FORCE_ONLINE_FLAG}")
        return Ok(None)

    deleted = provider.delete(version, Scope.REMOTE, requirements)
    if isinstance(deleted, Err):
        return deleted
    log.add(provider, Scope.REMOTE, deleted.value)
    return Ok(None)


def _retract_package(
    provider: RegistryProvider,
    version: Version,
    requirements: Requirements,
    options: RetractOptions,
    log: _Log,
) -> Result[None, RetractError]:
    proceed = _should_delete(provider, version, Scope.REMOTE, requirements, options, log)
    if isinstance(proceed, Err):
        return proceed
    if not proceed.value:
        return Ok(None)

    if not options.force_online:
        spec = package_spec(requirements.package_name or "", str(version))
        log.add(
            provider,
            Scope.REMOTE,
            f"You need to specify {FORCE_ONLINE_FLAG} to unpublish {spec}. This action is irreversible",
        )
        return Ok(None)

    deleted = provider.delete(version, Scope.REMOTE, requirements)
    if isinstance(deleted, Err):
        return deleted
    log.add(provider, Scope.REMOTE, deleted.value)
    return Ok(None)
