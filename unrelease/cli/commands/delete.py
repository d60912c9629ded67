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
from unrelease.services.retract import RetractOptions, retract


def delete(
    ctx: typer.Context,
    version: str = typer.Argument(..., help="A semver-compatible version"),
    provider: list[str] = typer.Option(
        ..., "--provider", "-p", help="Provider(s) to delete from: git, npm or git,npm"
    ),
    force_online: bool = typer.Option(
        False, "--force-online", help="Also delete the remote tag / unpublish from the registry"
    ),
    npm_package_name: str | None = typer.Option(
        None, "--npm-package-name", help="Package name (skips the need of a local package.json)"
    ),
    git_discard_commit: bool = typer.Option(
        False,
        "--git-discard-commit",
        help="Discard the release commit; its changes are kept, only the commit and message go",
    ),
    skip_existence_check: bool = typer.Option(
        False, "--skip-existence-check", help="Delete without checking the version exists first"
    ),
) -> None:
    """Delete a version from git tags and/or the npm registry."""
    cli = build_context(ctx.obj)

    names = parse_providers(provider)
    if isinstance(names, Err):
        exit_with_error(names.error, cli, ErrorCode.USER_ERROR)
    clean = normalize_or_exit(version, cli)

    providers = [build_provider(n, cli, npm_package_name=npm_package_name) for n in names.value]
    outcome = retract(
        clean,
        providers,
        RetractOptions(
            force_online=force_online,
            discard_commit=git_discard_commit,
            check_existence_first=not skip_existence_check,
        ),
    )

    if outcome.succeeded:
        for message in outcome.messages:
            cli.console.print(message)
        return

    *done, failure = outcome.messages
    for message in done:
        cli.console.print(message)
    cli.console.error(failure)
    raise typer.Exit(code=outcome.code)
