"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from unrelease.core.errors import ErrorCode, RetractError, error_code
from unrelease.core.result import Err, Ok, Result
from unrelease.core.version import Version, normalize
from unrelease.output.console import Style
from unrelease.providers.base import PROVIDER_NAMES, Provider, ProviderName
from unrelease.providers.git import TagProvider
from unrelease.providers.npm import RegistryProvider

if TYPE_CHECKING:
    from unrelease.cli.context import CLIContext


def exit_with_error(error: RetractError, ctx: CLIContext, code: ErrorCode | None = None) -> NoReturn:
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(code if code is not None else error_code(error.kind)))


def parse_providers(values: list[str]) -> Result[tuple[ProviderName, ...], RetractError]:
    """Accept ``-p git,npm`` as well as ``-p git -p npm``; order and duplicates are dropped."""
    names: set[str] = set()
    for value in values:
        for item in value.split(","):
            item = item.strip().lower()
            if not item:
                continue
            if item not in PROVIDER_NAMES:
                return Err(
                    RetractError(
                        kind="invalid_input",
                        message=f'The provider "{item}" is not supported',
                        hint="Supported providers: " + ", ".join(PROVIDER_NAMES),
                    )
                )
            names.add(item)

    if not names:
        return Err(
            RetractError(
                kind="invalid_input",
                message="no provider given",
                hint="Pass --provider git, --provider npm or --provider git,npm.",
            )
        )
    return Ok(tuple(n for n in PROVIDER_NAMES if n in names))


def normalize_or_exit(raw: str, ctx: CLIContext) -> Version:
    version = normalize(raw)
    if isinstance(version, Err):
        exit_with_error(version.error, ctx, ErrorCode.USER_ERROR)
    return version.value


def build_provider(name: ProviderName, ctx: CLIContext, *, npm_package_name: str | None) -> Provider:
    match name:
        case "git":
            return TagProvider.from_config(ctx.config, ctx.runner)
        case "npm":
            return RegistryProvider.from_config(ctx.config, ctx.runner, package_name=npm_package_name)
