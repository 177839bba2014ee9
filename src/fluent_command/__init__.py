"""fluent-command - chainable builder for running external processes.

Environment variables:
    FCMD_READ_CHUNK_SIZE: bytes per pipe read (default 4096)
    FCMD_ENCODING_ERRORS: decoder error handler (default replace)
    FCMD_LOG_DEBUG: write debug logs to a temp file (default false)

Usage:
    from fluent_command import fcmd

    outcome = await fcmd("ls").opt("l").run()
"""

__version__ = "0.1.0"

from .command import FluentCommand, fcmd
from .errors import CommandFailedError, FluentCommandError, ProcessExitError, SpawnError
from .paths import resolve_path
from .types import (
    SPAWN_FAILURE_CODE,
    CommandFailure,
    CommandOutcome,
    CommandResult,
    CommandSuccess,
    FailureKind,
    OutputHandler,
    SpawnHandler,
    SpawnInfo,
)

__all__ = [
    "__version__",
    "FluentCommand",
    "fcmd",
    "resolve_path",
    "SPAWN_FAILURE_CODE",
    "CommandFailure",
    "CommandOutcome",
    "CommandResult",
    "CommandSuccess",
    "FailureKind",
    "OutputHandler",
    "SpawnHandler",
    "SpawnInfo",
    "CommandFailedError",
    "FluentCommandError",
    "ProcessExitError",
    "SpawnError",
]
