"""Runtime module for process execution.

This module drives a single command from spawn to settlement: working
directory resolution, stream multiplexing, observer fan-out and outcome
projection.
"""

from __future__ import annotations

from .executor import IS_WINDOWS, CommandExecutor
from .outcome import project_failure, project_success
from .state import ExecutionState, ObserverSet, SpawnSpec

__all__ = [
    "IS_WINDOWS",
    "CommandExecutor",
    "ExecutionState",
    "ObserverSet",
    "SpawnSpec",
    "project_failure",
    "project_success",
]
