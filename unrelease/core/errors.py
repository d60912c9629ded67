"""Error kinds and process exit codes.

``RetractError`` is the error value carried by every failing stage. Its
``kind`` is a closed set; ``error_code`` maps each kind to the exit code
the CLI reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

__all__ = ["ErrorCode", "ErrorKind", "RetractError", "error_code"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad version, unknown provider, invalid config)
    - 2: Environment error (missing tool, not a repository, no manifest)
    - 3: Command error (an external git/npm invocation failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    COMMAND_ERROR = 3

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK


ErrorKind = Literal[
    "tool_missing",
    "not_a_repository",
    "manifest_not_found",
    "manifest_invalid",
    "invalid_input",
    "invalid_version",
    "invalid_config",
    "unresolvable_commit",
    "no_parent_commit",
    "command_failed",
]


@dataclass(frozen=True, slots=True)
class RetractError:
    kind: ErrorKind
    message: str
    hint: str | None = None


def error_code(kind: ErrorKind) -> ErrorCode:
    if kind in {"tool_missing", "not_a_repository", "manifest_not_found", "manifest_invalid"}:
        return ErrorCode.ENV_ERROR
    if kind in {"unresolvable_commit", "no_parent_commit", "command_failed"}:
        return ErrorCode.COMMAND_ERROR
    return ErrorCode.USER_ERROR
