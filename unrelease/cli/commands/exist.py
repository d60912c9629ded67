from __future__ import annotations

import typer

from unrelease.cli.commands._helpers import (
    build_provider,
    exit_with_error,
    normalize_or_exit,
    parse_providers,
)
from unrelease.cli.context import build_context
from unrelease.core.errors import ErrorCode
from unrelease.core.result import Err
from unrelease.services.exist import check_exists


def exist(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="A semver-compatible version"),
    provider: str = typer.Argument(..., help="The provider to look on: git or npm"),
    npm_package_name: str | None = typer.Option(
        None, "--npm-package-name", help="Package name (skips the need of a local package.json)"
    ),
) -> None:
    """Check whether a version is published.

    Exit code 0 means present. git: 1 if the tag is missing locally or on
    the remote. npm: 1 if the version is missing, 2 if the package is.
    3 if existence could not be determined (tool missing, no manifest,
    failing lookup).
    """
    cli = build_context(ctx.obj)

    names = parse_providers([provider])
    if isinstance(names, Err):
        exit_with_error(names.error, cli, ErrorCode.USER_ERROR)
    if len(names.value) != 1:
        cli.console.error("exist checks exactly one provider")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    clean = normalize_or_exit(version, cli)

    report = check_exists(clean, build_provider(names.value[0], cli, npm_package_name=npm_package_name))
    for message in report.messages:
        cli.console.print(message)
    if report.code != 0:
        raise typer.Exit(code=report.code)
