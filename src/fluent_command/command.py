"""Fluent command builder.

Usage:
    outcome = await (
        fcmd("git")
        .args("log")
        .option("max-count", 5)
        .cwd(repo_root)
        .on_stdout(progress.write)
        .read()
    )
    if outcome.ok:
        print(outcome.stdout)
    else:
        print(outcome.exit_code, outcome.stderr)
"""

from __future__ import annotations

import os
import shlex
from dataclasses import replace

from .runtime.executor import CommandExecutor
from .runtime.state import ObserverSet, SpawnSpec
from .types import CommandOutcome, OutputHandler, SpawnHandler

__all__ = ["FluentCommand", "fcmd"]


class FluentCommand:
    """Accumulates what to run, then runs it.

    Builder methods append to private state and return the same instance so
    calls can be chained. Nothing is resolved or started until run() or
    read() is awaited.

    Each observer slot (spawn, stdout, stderr, output) holds at most one
    callback: registering again replaces the earlier one. This is a fixed
    contract, not a fan-out.

    A command can be awaited more than once; every execution starts with
    empty buffers and sees the builder state as it was at that moment.
    """

    def __init__(self, executable: str, *initial_args: str) -> None:
        self._executable = executable
        self._command_args: list[str] = list(initial_args)
        self._cwd_path = ""
        self._extra_cwd_pieces: tuple[str, ...] = ()
        self._observers = ObserverSet()

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def command_args(self) -> list[str]:
        """Copy of the argument vector built so far."""
        return list(self._command_args)

    def __str__(self) -> str:
        # Display only; execution never goes through a shell.
        return shlex.join([self._executable, *self._command_args])

    def __repr__(self) -> str:
        return f"FluentCommand({str(self)!r})"

    # =========================================================================
    # Arguments
    # =========================================================================

    def args(self, an_arg: str, *extra_args: str) -> FluentCommand:
        """Append one or more literal arguments, in order."""
        self._command_args.append(an_arg)
        self._command_args.extend(extra_args)
        return self

    def opt(self, option_key: str, option_value: str | int | float | None = None) -> FluentCommand:
        """Append ``-key`` and, if given, its value as a separate argument."""
        self._add_option_pair(1, option_key, option_value)
        return self

    def option(self, option_key: str, option_value: str | int | float | None = None) -> FluentCommand:
        """Append ``--key`` and, if given, its value as a separate argument."""
        self._add_option_pair(2, option_key, option_value)
        return self

    def _add_option_pair(
        self,
        dashes: int,
        option_key: str,
        option_value: str | int | float | None,
    ) -> None:
        # bool is an int subclass but "--flag True" is never what was meant
        if isinstance(option_value, bool) or not isinstance(
            option_value, (str, int, float, type(None))
        ):
            raise TypeError(
                f"option value for {option_key!r} must be str, int, float or None, "
                f"got {type(option_value).__name__}"
            )

        if option_key:
            self._command_args.append("-" * dashes + option_key)

        if isinstance(option_value, str):
            if option_value:
                self._command_args.append(option_value)
        elif option_value is not None:
            self._command_args.append(str(option_value))

    # =========================================================================
    # Working directory
    # =========================================================================

    def cwd(
        self,
        cwd_path: str | os.PathLike[str],
        *extra_cwd_pieces: str | os.PathLike[str],
    ) -> FluentCommand:
        """Set the working directory fragments.

        Resolution happens at execution time: the process cwd, then
        ``cwd_path``, then each extra piece, each joined onto the previous
        result. An absolute fragment discards what came before it. Calling
        again replaces all fragments.
        """
        self._cwd_path = os.fspath(cwd_path)
        self._extra_cwd_pieces = tuple(os.fspath(piece) for piece in extra_cwd_pieces)
        return self

    # =========================================================================
    # Observers (single slot each)
    # =========================================================================

    def on_spawn(self, spawn_handler: SpawnHandler) -> FluentCommand:
        """Receive SpawnInfo once the process has been created."""
        self._observers = replace(self._observers, on_spawn=spawn_handler)
        return self

    def on_stdout(self, stdout_handler: OutputHandler) -> FluentCommand:
        self._observers = replace(self._observers, on_stdout=stdout_handler)
        return self

    def on_stderr(self, stderr_handler: OutputHandler) -> FluentCommand:
        self._observers = replace(self._observers, on_stderr=stderr_handler)
        return self

    def on_output(self, output_handler: OutputHandler) -> FluentCommand:
        """Receive every stdout and stderr chunk, in arrival order."""
        self._observers = replace(self._observers, on_output=output_handler)
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    def _snapshot(self) -> SpawnSpec:
        return SpawnSpec(
            executable=self._executable,
            command_args=tuple(self._command_args),
            cwd_path=self._cwd_path,
            extra_cwd_pieces=self._extra_cwd_pieces,
        )

    async def run(self) -> CommandOutcome:
        """Execute, echoing output to this process's stdout/stderr as it arrives."""
        return await CommandExecutor().execute(self._snapshot(), self._observers, mirror=True)

    async def read(self) -> CommandOutcome:
        """Execute silently; output is only captured and observed."""
        return await CommandExecutor().execute(self._snapshot(), self._observers, mirror=False)


def fcmd(executable: str, *initial_args: str) -> FluentCommand:
    """Shorthand for ``FluentCommand(executable, *initial_args)``."""
    return FluentCommand(executable, *initial_args)
