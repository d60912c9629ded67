"""Git repository abstraction.

The subset of git the tag provider needs: tag lookup (local and on a
remote), tag deletion, commit resolution and the soft reset used to
discard a release commit. All operations return Result types.

Usage:
    repo = Repository(Path("."), runner=SubprocessRunner())

    match repo.has_local_tag("v1.2.3"):
        case Ok(True):
            repo.delete_local_tag("v1.2.3")
        case Ok(False):
            print("no such tag")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from unrelease.core.config import GitConfig, TimeoutsConfig
from unrelease.core.result import Err, Ok, Result
from unrelease.platform.process import CommandRunner, ProcessError, run_checked

__all__ = ["GitError", "Repository"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The full git invocation that failed
        message: Error message (stderr of the failed command)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def describe(self) -> str:
        head = f'An error occurred while executing "{self.command}" (exit {self.returncode})'
        return f"{head}: {self.message}" if self.message else head


class Repository:
    """Git operations on the repository containing ``path``.

    Attributes:
        path: Directory inside the working tree (not necessarily its root)
    """

    def __init__(
        self,
        path: Path,
        *,
        runner: CommandRunner,
        config: GitConfig | None = None,
        timeouts: TimeoutsConfig | None = None,
    ) -> None:
        self.path = path
        self._runner = runner
        self._config = config or GitConfig()
        self._timeouts = timeouts or TimeoutsConfig()

    @property
    def executable(self) -> str:
        return self._config.executable

    def is_available(self) -> bool:
        """True if the git executable resolves on the search path."""
        return self._runner.which(self._config.executable) is not None

    def is_inside_work_tree(self) -> bool:
        """True if ``path`` is inside a git working tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def has_local_tag(self, tag: str) -> Result[bool, GitError]:
        """Check the locally known tags for an exact ``tag`` match."""
        result = self._run(["tag", "--list", tag])
        if isinstance(result, Err):
            return Err(self._error(result.error))
        return Ok(tag in _lines(result.value))

    def has_remote_tag(self, remote: str, tag: str) -> Result[bool, GitError]:
        """Ask ``remote`` for ``refs/tags/<tag>`` without fetching history."""
        ref = f"refs/tags/{tag}"
        result = self._run(["ls-remote", "--tags", remote, ref], network=True)
        if isinstance(result, Err):
            return Err(self._error(result.error))
        # Each line is "<sha>\t<ref>"; annotated tags add a peeled "<ref>^{}" line.
        refs = {line.split("\t", 1)[-1] for line in _lines(result.value)}
        return Ok(ref in refs)

    def delete_local_tag(self, tag: str) -> Result[None, GitError]:
        result = self._run(["tag", "--delete", tag])
        if isinstance(result, Err):
            return Err(self._error(result.error))
        return Ok(None)

    def delete_remote_tag(self, remote: str, tag: str) -> Result[None, GitError]:
        result = self._run(["push", remote, f":refs/tags/{tag}"], network=True)
        if isinstance(result, Err):
            return Err(self._error(result.error))
        return Ok(None)

    def resolve_commit(self, ref: str) -> Result[str, GitError]:
        """Resolve ``ref`` (tag, HEAD, ``<sha>~``) to a full commit hash."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])
        if isinstance(result, Err):
            error = self._error(result.error)
            if not error.message:
                error = GitError(
                    command=error.command,
                    message=f"cannot resolve {ref} to a commit",
                    returncode=error.returncode,
                )
            return Err(error)
        return Ok(result.value.strip())

    def commit_message(self, commit: str) -> Result[str, GitError]:
        """Full message of ``commit`` without the trailing newline."""
        result = self._run(["log", "-n", "1", "--format=%B", commit])
        if isinstance(result, Err):
            return Err(self._error(result.error))
        return Ok(result.value.strip())

    def reset_soft(self, commit: str) -> Result[None, GitError]:
        """Move HEAD to ``commit`` keeping index and working tree."""
        result = self._run(["reset", "--soft", commit])
        if isinstance(result, Err):
            return Err(self._error(result.error))
        return Ok(None)

    def _run(self, args: list[str], *, network: bool = False) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        timeout = self._timeouts.git_network if network else self._timeouts.git
        return run_checked(
            self._runner,
            [self._config.executable, "-C", str(self.path), *args],
            cwd=self.path,
            timeout=timeout,
        )

    def _error(self, e: ProcessError) -> GitError:
        # Drop "-C <path>" from the reported invocation.
        args = (e.command[0], *e.command[3:])
        return GitError(
            command=" ".join(args),
            message=e.stderr.strip(),
            returncode=e.returncode,
        )


def _lines(text: str) -> list[str]:
    return [ln.strip() for ln in text.splitlines() if ln.strip()]
