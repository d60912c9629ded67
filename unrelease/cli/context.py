from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from unrelease.core.config import RetractConfig, load_config
from unrelease.core.errors import ErrorCode
from unrelease.core.result import Err
from unrelease.output.console import ConsoleProtocol, RichConsole, Style
from unrelease.platform.process import (
    CommandRunner,
    DeadlineRunner,
    EchoingRunner,
    SubprocessRunner,
)


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name."""

    cwd: Path | None = None
    config: Path | None = None
    timeout: float | None = None
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: RetractConfig
    runner: CommandRunner
    console: ConsoleProtocol


def build_context(options: GlobalOptions | None) -> CLIContext:
    options = options or GlobalOptions()
    console = RichConsole()

    try:
        cwd = (options.cwd or Path.cwd()).expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid working directory: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if not cwd.is_dir():
        typer.echo(f"error: {cwd} is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = load_config(options.config, cwd=cwd)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    runner: CommandRunner = SubprocessRunner()
    if options.timeout is not None:
        runner = DeadlineRunner(runner, options.timeout)
    if options.verbose:
        runner = EchoingRunner(runner, lambda line: console.print(line, Style.DIM))

    return CLIContext(config=config_result.value, runner=runner, console=console)
