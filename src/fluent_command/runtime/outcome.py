"""Turn a settled execution into an immutable outcome record."""

from __future__ import annotations

from ..types import CommandFailure, CommandSuccess
from .state import ExecutionState, SpawnSpec

__all__ = ["project_success", "project_failure"]


def _common_fields(spec: SpawnSpec, state: ExecutionState) -> dict:
    # Only the final record is trimmed; chunks given to observers never are.
    return {
        "executable": spec.executable,
        "command_args": spec.command_args,
        "cwd": state.resolved_cwd,
        "duration_ms": state.elapsed_ms(),
        "stdout": "".join(state.stdout).rstrip(),
        "stderr": "".join(state.stderr).rstrip(),
        "output": "".join(state.output).rstrip(),
    }


def project_success(spec: SpawnSpec, state: ExecutionState) -> CommandSuccess:
    return CommandSuccess(**_common_fields(spec, state))


def project_failure(spec: SpawnSpec, state: ExecutionState) -> CommandFailure:
    """Build a failure record.

    exit_code and signal are attached as known; both can be None, e.g. when a
    platform reports neither.
    """
    return CommandFailure(
        **_common_fields(spec, state),
        exit_code=state.exit_code,
        signal=state.signal,
    )
