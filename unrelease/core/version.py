"""Semantic version cleaning.

Raw input is cleaned the way ``npm semver.clean`` does it; only ASCII
digits are accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from unrelease.core.errors import RetractError
from unrelease.core.result import Err, Ok, Result

__all__ = ["Version", "normalize"]


_NUM = r"0|[1-9][0-9]*"
_PRE_ID = r"0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*"
_SEMVER_RE = re.compile(
    rf"^({_NUM})\.({_NUM})\.({_NUM})"
    rf"(?:-((?:{_PRE_ID})(?:\.(?:{_PRE_ID}))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)
_LEADING_RE = re.compile(r"^[=v]+")


@dataclass(frozen=True, slots=True)
class Version:
    """A cleaned semantic version: ``MAJOR.MINOR.PATCH[-pre]``.

    Only ``normalize`` builds these; build metadata is not part of the
    canonical form.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{'.'.join(self.prerelease)}"
        return core

    def to_tag(self, prefix: str = "v") -> str:
        return f"{prefix}{self}"


def normalize(raw: str) -> Result[Version, RetractError]:
    """Clean ``raw`` into a Version.

    Surrounding whitespace and leading ``=``/``v`` characters are dropped,
    the rest must be a strict semantic version.

    >>> str(normalize("v1.2.3 ").unwrap())
    '1.2.3'
    """
    cleaned = _LEADING_RE.sub("", raw.strip())
    m = _SEMVER_RE.match(cleaned)
    if m is None:
        return Err(
            RetractError(
                kind="invalid_version",
                message=f"not a semantic version: {raw.strip()!r}",
                hint="Expected MAJOR.MINOR.PATCH[-prerelease][+build], e.g. 1.2.3 or v1.2.3-beta.1",
            )
        )

    prerelease = tuple(m.group(4).split(".")) if m.group(4) else ()
    return Ok(Version(int(m.group(1)), int(m.group(2)), int(m.group(3)), prerelease))
