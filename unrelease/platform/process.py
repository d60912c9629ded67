"""External command execution.

All I/O of the engine goes through a ``CommandRunner``: the version-control
and package-manager tools are invoked as processes and only their exit
status and captured output are inspected. Tests substitute a scripted
runner instead of spawning real tools.

Usage:
    runner = SubprocessRunner()
    result = run_checked(runner, ["git", "tag", "-l", "v1.2.3"], cwd=repo, timeout=30.0)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"{error}: {error.stderr}")
"""

from __future__ import annotations

import shutil
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from unrelease.core.result import Err, Ok, Result

__all__ = [
    "CommandOutput",
    "CommandRunner",
    "DeadlineRunner",
    "EchoingRunner",
    "ProcessError",
    "SubprocessRunner",
    "run_checked",
]


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Exit status and captured output of one invocation.

    ``returncode`` is -1 when the process could not be started or was
    killed after its timeout.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner(Protocol):
    """Capability for running external commands."""

    def run(self, args: list[str], *, cwd: Path, timeout: float | None = None) -> CommandOutput:
        """Run a command to completion and capture its output."""
        ...

    def which(self, name: str) -> str | None:
        """Resolve an executable on the search path."""
        ...


class SubprocessRunner:
    """Default runner using subprocess.run."""

    def run(self, args: list[str], *, cwd: Path, timeout: float | None = None) -> CommandOutput:
        try:
            proc = subprocess.run(
                args,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return CommandOutput(returncode=-1, stderr=f"Command timed out after {timeout}s")
        except OSError as e:
            return CommandOutput(returncode=-1, stderr=str(e))
        return CommandOutput(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    def which(self, name: str) -> str | None:
        return shutil.which(name)


class DeadlineRunner:
    """Bounds every command by one overall deadline.

    The whole ``delete``/``exist`` call shares a single time budget: each
    command gets the smaller of its own timeout and the time left. Once
    the budget is spent, commands are no longer started.
    """

    def __init__(
        self,
        inner: CommandRunner,
        seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._inner = inner
        self._clock = clock
        self._deadline = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._deadline - self._clock())

    def run(self, args: list[str], *, cwd: Path, timeout: float | None = None) -> CommandOutput:
        left = self.remaining()
        if left <= 0:
            return CommandOutput(returncode=-1, stderr="Deadline exceeded before the command started")
        bounded = left if timeout is None else min(timeout, left)
        return self._inner.run(args, cwd=cwd, timeout=bounded)

    def which(self, name: str) -> str | None:
        return self._inner.which(name)


class EchoingRunner:
    """Reports each command to ``echo`` before delegating."""

    def __init__(self, inner: CommandRunner, echo: Callable[[str], None]) -> None:
        self._inner = inner
        self._echo = echo

    def run(self, args: list[str], *, cwd: Path, timeout: float | None = None) -> CommandOutput:
        self._echo("$ " + " ".join(args))
        return self._inner.run(args, cwd=cwd, timeout=timeout)

    def which(self, name: str) -> str | None:
        return self._inner.which(name)


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process.
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    def describe(self) -> str:
        """Full invocation, exit status and stderr for reporting."""
        detail = self.stderr.strip() or self.stdout.strip()
        head = f'"{" ".join(self.command)}" failed (exit {self.returncode})'
        return f"{head}: {detail}" if detail else head


def run_checked(
    runner: CommandRunner,
    cmd: list[str],
    *,
    cwd: Path,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` and return its stdout, or a ProcessError on non-zero exit."""
    out = runner.run(cmd, cwd=cwd, timeout=timeout)
    if out.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=out.returncode,
                stdout=out.stdout,
                stderr=out.stderr,
            )
        )
    return Ok(out.stdout)
