"""Process executor: spawn, stream, settle.

fluent-command runtime module v0.1.0

This module provides:
- Working directory resolution, once per execution
- Process creation without a shell and without a console window on Windows
- Concurrent stdout/stderr pumping into stdout, stderr and combined buffers
- Per-chunk fan-out to observers, optionally mirrored to our own stdout/stderr
- Settlement into a CommandSuccess or CommandFailure value

Key design points:
- Both pumps run on one event loop; each chunk is handled synchronously, so
  buffers and observers see chunks in a single, serialized order
- Observer and mirror failures are logged and isolated, never propagated
- Spawn failures are reported as values carrying SPAWN_FAILURE_CODE
- The child is always reaped, even when the awaiting task is cancelled
"""

from __future__ import annotations

import asyncio
import codecs
import errno
import logging
import os
import signal
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Any, Callable

import anyio

from ..config import Config, configure_debug_logging, get_config
from ..paths import resolve_path
from ..types import SPAWN_FAILURE_CODE, CommandOutcome, SpawnInfo
from .outcome import project_failure, project_success
from .state import ExecutionState, ObserverSet, SpawnSpec

__all__ = [
    "CommandExecutor",
    "IS_WINDOWS",
]

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"


@dataclass
class CommandExecutor:
    """Drives one execution from invocation to settlement.

    Example:
        executor = CommandExecutor()
        spec = SpawnSpec(executable="git", command_args=("status",))
        outcome = await executor.execute(spec, ObserverSet(on_output=print))
        if outcome.ok:
            ...

    The executor holds configuration only; all per-run state lives in an
    ExecutionState created by execute(), so one executor can serve any number
    of concurrent executions.
    """

    config: Config = field(default_factory=get_config)

    async def execute(
        self,
        spec: SpawnSpec,
        observers: ObserverSet | None = None,
        *,
        mirror: bool = False,
    ) -> CommandOutcome:
        """Run the process described by ``spec`` to completion.

        Args:
            spec: What to run and where
            observers: Callbacks for spawn and output chunks
            mirror: Also write every chunk to sys.stdout / sys.stderr

        Returns:
            CommandSuccess on exit code 0, otherwise CommandFailure.
            Never raises for a failing or unstartable process.
        """
        configure_debug_logging(self.config)
        observers = observers or ObserverSet()

        state = ExecutionState()
        state.resolved_cwd = resolve_path(
            os.getcwd(), spec.cwd_path, *spec.extra_cwd_pieces
        )

        try:
            process = await asyncio.create_subprocess_exec(
                spec.executable,
                *spec.command_args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=state.resolved_cwd,
                **self._build_subprocess_kwargs(),
            )
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to start {spec.executable} cwd={state.resolved_cwd}: {e}")
            state.exit_code = SPAWN_FAILURE_CODE
            self._on_chunk(state, observers, mirror, "stderr", self._describe_spawn_error(e))
            return project_failure(spec, state)

        state.pid = process.pid
        logger.debug(
            f"Started subprocess pid={state.pid} "
            f"argv={spec.executable} cwd={state.resolved_cwd}"
        )

        try:
            if observers.on_spawn is not None:
                info = SpawnInfo(
                    executable=spec.executable,
                    command_args=spec.command_args,
                    cwd=state.resolved_cwd,
                )
                self._notify("spawn", observers.on_spawn, info)

            async with anyio.create_task_group() as tg:
                tg.start_soon(self._pump, process.stdout, "stdout", state, observers, mirror)
                tg.start_soon(self._pump, process.stderr, "stderr", state, observers, mirror)

            returncode = await process.wait()
        finally:
            # Reap the child even when the caller is cancelled mid-stream
            with anyio.CancelScope(shield=True):
                await self._reap(process, state)

        self._record_exit(state, returncode)

        logger.debug(
            f"Subprocess completed pid={state.pid} "
            f"returncode={returncode} duration_ms={state.elapsed_ms():.1f}"
        )

        if state.exit_code == 0:
            return project_success(spec, state)
        return project_failure(spec, state)

    def _build_subprocess_kwargs(self) -> dict[str, Any]:
        """Build platform-specific subprocess kwargs."""
        kwargs: dict[str, Any] = {}
        if IS_WINDOWS:
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW
        return kwargs

    async def _reap(self, process: asyncio.subprocess.Process, state: ExecutionState) -> None:
        """Kill the child if it is still running, then wait for it to exit."""
        if process.returncode is not None:
            return

        logger.debug(f"Killing unfinished subprocess pid={state.pid}")
        try:
            process.kill()
        except ProcessLookupError:
            pass
        except OSError as e:
            logger.warning(f"Error killing subprocess pid={state.pid}: {e}")
        await process.wait()

    async def _pump(
        self,
        stream: asyncio.StreamReader | None,
        channel: str,
        state: ExecutionState,
        observers: ObserverSet,
        mirror: bool,
    ) -> None:
        """Read one pipe until EOF, handing each decoded chunk to _on_chunk.

        An incremental decoder keeps multi-byte characters intact when a read
        boundary splits them.
        """
        if stream is None:
            return

        decoder = codecs.getincrementaldecoder("utf-8")(errors=self.config.encoding_errors)
        while True:
            data = await stream.read(self.config.read_chunk_size)
            chunk = decoder.decode(data, final=not data)
            if chunk:
                self._on_chunk(state, observers, mirror, channel, chunk)
            if not data:
                break

    def _on_chunk(
        self,
        state: ExecutionState,
        observers: ObserverSet,
        mirror: bool,
        channel: str,
        chunk: str,
    ) -> None:
        state.append(channel, chunk)

        handler = observers.on_stdout if channel == "stdout" else observers.on_stderr
        if handler is not None:
            self._notify(channel, handler, chunk)
        if observers.on_output is not None:
            self._notify("output", observers.on_output, chunk)

        if mirror:
            self._mirror(channel, chunk)

    def _notify(self, channel: str, handler: Callable[[Any], None], payload: Any) -> None:
        """Call an observer, logging instead of propagating its failures."""
        try:
            handler(payload)
        except Exception:
            logger.warning(f"{channel} observer raised; continuing", exc_info=True)

    def _mirror(self, channel: str, chunk: str) -> None:
        # Looked up per chunk so redirected sys.stdout / sys.stderr are honored.
        # Detached processes (pythonw, services) have no stdout / stderr at all.
        target = sys.stdout if channel == "stdout" else sys.stderr
        if target is None:
            return
        try:
            target.write(chunk)
            target.flush()
        except Exception:
            logger.warning(f"Could not mirror {channel} chunk; continuing", exc_info=True)

    @staticmethod
    def _record_exit(state: ExecutionState, returncode: int) -> None:
        """Store exit code or signal.

        On POSIX a negative return code means "killed by signal -returncode".
        """
        if returncode < 0 and not IS_WINDOWS:
            try:
                state.signal = signal.Signals(-returncode)
                return
            except ValueError:
                pass
        state.exit_code = returncode

    @staticmethod
    def _describe_spawn_error(e: Exception) -> str:
        """Format a spawn failure as ``<ERRNO_NAME>: <message>``."""
        if isinstance(e, OSError) and e.errno is not None:
            code = errno.errorcode.get(e.errno, f"E{e.errno}")
            message = e.strerror or str(e)
            if e.filename is not None:
                message = f"{message}: {e.filename}"
        else:
            code = type(e).__name__
            message = str(e)
        return f"{code}: {message}"
