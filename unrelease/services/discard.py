"""Release commit discard.

When a tag is deleted together with ``--git-discard-commit``, the commit
the tag pointed to can be removed from history, but only when doing so
is trivially safe:

1. its message is exactly the version string (a dedicated release commit),
2. it has a parent to rewind to,
3. it is the current HEAD.

The rewind is a soft reset to the parent: the commit disappears while its
changes stay staged in the working tree. Older release commits are never
rewritten.
"""

from __future__ import annotations

from dataclasses import dataclass

from unrelease.core.errors import RetractError
from unrelease.core.result import Err, Ok, Result
from unrelease.core.version import Version
from unrelease.git.repository import Repository

__all__ = ["DiscardDecision", "discard_release_commit", "resolve_tag_commit"]


@dataclass(frozen=True, slots=True)
class DiscardDecision:
    """Whether the release commit was discarded, and why (not)."""

    eligible: bool
    reason: str


def resolve_tag_commit(repo: Repository, tag: str) -> Result[str, RetractError]:
    """Resolve the commit ``tag`` points to. Must run before the tag is deleted."""
    commit = repo.resolve_commit(tag)
    if isinstance(commit, Err):
        return Err(
            RetractError(
                kind="unresolvable_commit",
                message=f"The commit of the tag {tag} cannot be resolved: {commit.error.describe()}",
            )
        )
    return commit


def discard_release_commit(
    repo: Repository,
    commit: str,
    version: Version,
    *,
    tag: str,
) -> Result[DiscardDecision, RetractError]:
    """Soft-reset ``commit`` away if it is the HEAD release commit of ``version``."""
    message = repo.commit_message(commit)
    if isinstance(message, Err):
        return Err(RetractError(kind="command_failed", message=message.error.describe()))
    if message.value != str(version):
        return Ok(
            DiscardDecision(
                eligible=False,
                reason=f"The discard has been canceled: the tag {tag} does not point to a release commit",
            )
        )

    head = repo.resolve_commit("HEAD")
    if isinstance(head, Err):
        return Err(
            RetractError(
                kind="unresolvable_commit",
                message=f"HEAD cannot be resolved: {head.error.describe()}",
            )
        )

    parent = repo.resolve_commit(f"{commit}~")
    if isinstance(parent, Err):
        return Err(
            RetractError(
                kind="no_parent_commit",
                message="The initial commit is not discardable",
            )
        )

    if commit != head.value:
        return Ok(
            DiscardDecision(
                eligible=False,
                reason="Currently only the last commit is discardable, so no action has been made",
            )
        )

    reset = repo.reset_soft(parent.value)
    if isinstance(reset, Err):
        return Err(RetractError(kind="command_failed", message=reset.error.describe()))
    return Ok(
        DiscardDecision(
            eligible=True,
            reason=f"The last commit (tagged by {tag}) has been discarded",
        )
    )
