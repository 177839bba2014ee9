"""fluent-command exception classes.

Failures are normally returned as CommandFailure values; these exceptions are
only raised when a caller opts in through CommandFailure.unwrap().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import CommandFailure

__all__ = [
    "FluentCommandError",
    "CommandFailedError",
    "ProcessExitError",
    "SpawnError",
]


class FluentCommandError(Exception):
    """Base exception for fluent-command."""
    pass


class CommandFailedError(FluentCommandError):
    """A command did not succeed.

    Attributes:
        outcome: The failure record, with all captured output
    """

    def __init__(self, outcome: CommandFailure) -> None:
        self.outcome = outcome
        super().__init__(self._describe(outcome))

    @staticmethod
    def _describe(outcome: CommandFailure) -> str:
        if outcome.signal is not None:
            status = f"killed by {outcome.signal.name}"
        else:
            status = f"exit code {outcome.exit_code}"
        message = f"{outcome.executable} failed ({status})"
        if outcome.stderr:
            message += f": {outcome.stderr.splitlines()[-1]}"
        return message


class ProcessExitError(CommandFailedError):
    """The process ran and exited nonzero or was killed by a signal."""
    pass


class SpawnError(CommandFailedError):
    """The OS could not create the process (missing executable, no permission)."""
    pass
