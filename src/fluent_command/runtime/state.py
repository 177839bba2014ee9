"""Per-execution data: what to run, who is listening, what has been seen."""

from __future__ import annotations

import signal
import time
from dataclasses import dataclass, field

from ..types import OutputHandler, SpawnHandler

__all__ = [
    "SpawnSpec",
    "ObserverSet",
    "ExecutionState",
]


@dataclass(frozen=True)
class SpawnSpec:
    """Specification for a process to run.

    Snapshotted from the builder when an execution starts, so later builder
    calls never affect a run in flight.

    Attributes:
        executable: Executable name or path (no shell lookup beyond PATH)
        command_args: Argument vector, passed literally
        cwd_path: Base working directory fragment ("" = process cwd)
        extra_cwd_pieces: Fragments applied after cwd_path, in order
    """

    executable: str
    command_args: tuple[str, ...] = ()
    cwd_path: str = ""
    extra_cwd_pieces: tuple[str, ...] = ()


@dataclass(frozen=True)
class ObserverSet:
    """One optional callback per channel.

    A builder keeps exactly one callback per slot; registering again replaces
    the previous one. There is no multi-subscriber fan-out.
    """

    on_spawn: SpawnHandler | None = None
    on_stdout: OutputHandler | None = None
    on_stderr: OutputHandler | None = None
    on_output: OutputHandler | None = None


@dataclass
class ExecutionState:
    """Mutable state owned by a single execution.

    A fresh instance is created for every run, so nothing leaks between two
    executions of the same command.

    Attributes:
        start_time: perf_counter() value at invocation
        stdout: stdout chunks in arrival order
        stderr: stderr chunks in arrival order
        output: stdout and stderr chunks interleaved in arrival order
        resolved_cwd: Absolute working directory, set once at execution start
        exit_code: Exit code, or SPAWN_FAILURE_CODE, once known
        signal: Terminating signal, if any
        pid: Child pid once spawned
    """

    start_time: float = field(default_factory=time.perf_counter)
    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    resolved_cwd: str = ""
    exit_code: int | None = None
    signal: signal.Signals | None = None
    pid: int | None = None

    def append(self, channel: str, chunk: str) -> None:
        """Record a chunk on its own channel and on the combined channel."""
        if channel == "stdout":
            self.stdout.append(chunk)
        else:
            self.stderr.append(chunk)
        self.output.append(chunk)

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000.0
