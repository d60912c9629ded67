"""Platform abstraction layer."""

from .process import (
    CommandOutput,
    CommandRunner,
    DeadlineRunner,
    EchoingRunner,
    ProcessError,
    SubprocessRunner,
    run_checked,
)

__all__ = [
    "CommandOutput",
    "CommandRunner",
    "DeadlineRunner",
    "EchoingRunner",
    "ProcessError",
    "SubprocessRunner",
    "run_checked",
]
