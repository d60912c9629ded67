from __future__ import annotations

from pathlib import Path

import typer

from unrelease import __version__
from unrelease.cli.commands.delete import delete
from unrelease.cli.commands.exist import exist
from unrelease.cli.context import GlobalOptions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Check and retract released versions (git tags, npm registry).",
)


app.command()(delete)
app.command()(exist)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        help="Working directory (repository and package.json search start)",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: unrelease.toml in the working directory or a parent)",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        min=0.1,
        help="Overall time limit in seconds for all git/npm invocations",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo each git/npm invocation."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    ctx.obj = GlobalOptions(cwd=cwd, config=config, timeout=timeout, verbose=verbose)


def main() -> None:
    app()
