"""Command outcome types.

fluent-command types v0.1.0

Defines the spawn info handed to spawn observers, the success/failure outcome
records and the observer callback aliases.
"""

from __future__ import annotations

import signal as signal_module
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Union

from .errors import ProcessExitError, SpawnError

__all__ = [
    "SPAWN_FAILURE_CODE",
    "FailureKind",
    "SpawnInfo",
    "CommandResult",
    "CommandSuccess",
    "CommandFailure",
    "CommandOutcome",
    "OutputHandler",
    "SpawnHandler",
]

# Reserved exit code meaning "the process could not be created at all".
# Real exits never produce a negative exit_code: negative return codes are
# reported through CommandFailure.signal instead.
SPAWN_FAILURE_CODE = -2


class FailureKind(str, Enum):
    """Why a command did not succeed."""

    PROCESS_EXIT = "process-exit"
    SPAWN = "spawn"


@dataclass(frozen=True)
class SpawnInfo:
    """What was started, and where.

    Attributes:
        executable: Executable name as given to the builder
        command_args: Argument vector, in call order
        cwd: Absolute, normalized working directory
    """

    executable: str
    command_args: tuple[str, ...]
    cwd: str


@dataclass(frozen=True)
class CommandResult(SpawnInfo, ABC):
    """Fields shared by both outcome variants. Not instantiated directly.

    The three text fields have trailing whitespace removed.

    Attributes:
        duration_ms: Time from invocation to settlement, in milliseconds
        stdout: Everything the process wrote to stdout
        stderr: Everything the process wrote to stderr
        output: stdout and stderr interleaved in arrival order
    """

    duration_ms: float = 0.0
    stdout: str = ""
    stderr: str = ""
    output: str = ""

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["command_args"] = list(self.command_args)
        data["ok"] = self.ok
        return data

    @property
    @abstractmethod
    def ok(self) -> bool:
        """True for CommandSuccess, False for CommandFailure."""


@dataclass(frozen=True)
class CommandSuccess(CommandResult):
    """Outcome of a command that exited with code 0."""

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> CommandSuccess:
        return self


@dataclass(frozen=True)
class CommandFailure(CommandResult):
    """Outcome of a command that exited nonzero, died by signal, or never started.

    Attributes:
        exit_code: Exit code if known; SPAWN_FAILURE_CODE if spawning failed
        signal: Terminating signal if the process was killed by one
    """

    exit_code: int | None = None
    signal: signal_module.Signals | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> FailureKind:
        if self.exit_code == SPAWN_FAILURE_CODE:
            return FailureKind.SPAWN
        return FailureKind.PROCESS_EXIT

    def unwrap(self) -> CommandSuccess:
        """Raise the exception matching this failure."""
        if self.kind is FailureKind.SPAWN:
            raise SpawnError(self)
        raise ProcessExitError(self)

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        data["kind"] = self.kind.value
        data["signal"] = self.signal.name if self.signal is not None else None
        return data


CommandOutcome = Union[CommandSuccess, CommandFailure]

# Observer callbacks
OutputHandler = Callable[[str], None]
SpawnHandler = Callable[[SpawnInfo], None]
