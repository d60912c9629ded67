"""Read-only existence report behind the ``exist`` command.

Exit codes 1 and 2 carry probe results (git: a scope is missing; npm:
version missing, package missing). Any failure to determine existence,
unmet requirements included, is reported as ``ErrorCode.COMMAND_ERROR``
so it never reads as "missing".
"""

from __future__ import annotations

from dataclasses import dataclass

from unrelease.core.errors import ErrorCode
from unrelease.core.result import Err
from unrelease.core.version import Version
from unrelease.providers.base import Provider, Scope, label

__all__ = ["ExistReport", "check_exists"]


@dataclass(frozen=True, slots=True)
class ExistReport:
    """Existence of a version on one provider.

    Attributes:
        code: 0 when present in every scope, otherwise the first non-zero
            probe code (git: 1; npm: 1 version missing, 2 package missing),
            or ``ErrorCode.COMMAND_ERROR`` when existence cannot be determined
        messages: One line per probed scope
    """

    code: int
    messages: tuple[str, ...]

    @property
    def present(self) -> bool:
        return self.code == 0


def check_exists(version: Version, provider: Provider) -> ExistReport:
    """Probe every scope of ``provider`` for ``version`` (read-only)."""
    requirements = provider.check_requirements()
    if isinstance(requirements, Err):
        error = requirements.error
        return ExistReport(
            code=int(ErrorCode.COMMAND_ERROR),
            messages=(label(provider.name, Scope.LOCAL) + error.message,),
        )

    code = 0
    messages: list[str] = []
    for scope in provider.scopes:
        existence = provider.check_existence(version, scope, requirements.value)
        if isinstance(existence, Err):
            error = existence.error
            messages.append(label(provider.name, scope) + error.message)
            return ExistReport(code=int(ErrorCode.COMMAND_ERROR), messages=tuple(messages))
        messages.append(label(provider.name, scope) + existence.value.message)
        code = code or existence.value.code

    return ExistReport(code=code, messages=tuple(messages))
