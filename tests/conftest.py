"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Add src to the Python path (development checkouts)
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fluent_command import FluentCommand, fcmd  # noqa: E402
from fluent_command.config import reload_config  # noqa: E402

FAKE_CLI = Path(__file__).parent / "fixtures" / "fake_cli.py"


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from default settings."""
    for name in ("FCMD_READ_CHUNK_SIZE", "FCMD_ENCODING_ERRORS", "FCMD_LOG_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def temp_workspace(tmp_path: Path) -> Path:
    """Create temporary workspace directory."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def fake_cli() -> Callable[..., FluentCommand]:
    """Build a command that runs tests/fixtures/fake_cli.py with given args."""

    def make(*args: str) -> FluentCommand:
        return fcmd(sys.executable, str(FAKE_CLI), *args)

    return make
