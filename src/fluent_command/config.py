"""fluent-command environment configuration.

Environment variables:
    FCMD_READ_CHUNK_SIZE: bytes requested per pipe read
        - default 4096
        - clamped to 1..1048576, invalid values fall back to the default

    FCMD_ENCODING_ERRORS: how undecodable bytes in child output are handled
        - replace = substitute U+FFFD (default)
        - ignore / backslashreplace
        - anything else falls back to replace

    FCMD_LOG_DEBUG: debug log file
        - true/1/yes/on = write fluent_command debug logs to a temp file
        - false/0/no/off = off (default, no handlers installed)

None of these change what a command returns; they only tune how output is
read and how the library logs.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

__all__ = ["Config", "load_config", "get_config", "reload_config", "configure_debug_logging"]

DEFAULT_READ_CHUNK_SIZE = 4096
MAX_READ_CHUNK_SIZE = 1024 * 1024

ENCODING_ERROR_HANDLERS = frozenset({"replace", "ignore", "backslashreplace"})


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_chunk_size(value: str | None) -> int:
    if not value:
        return DEFAULT_READ_CHUNK_SIZE
    try:
        size = int(value)
    except ValueError:
        return DEFAULT_READ_CHUNK_SIZE
    return max(1, min(size, MAX_READ_CHUNK_SIZE))


def _parse_encoding_errors(value: str | None) -> str:
    if not value:
        return "replace"
    value = value.lower().strip()
    return value if value in ENCODING_ERROR_HANDLERS else "replace"


@dataclass
class Config:
    """fluent-command settings.

    Attributes:
        read_chunk_size: Bytes requested per read from the child's pipes
        encoding_errors: Error handler for the UTF-8 decoder
        log_debug: Whether a debug log file is written
        log_file: Debug log path (set automatically when log_debug is on)
    """

    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    encoding_errors: str = "replace"
    log_debug: bool = False
    log_file: str | None = None

    def __repr__(self) -> str:
        return (
            f"Config(read_chunk_size={self.read_chunk_size}, "
            f"encoding_errors={self.encoding_errors}, "
            f"log_debug={self.log_debug}, "
            f"log_file={self.log_file})"
        )


def _generate_log_file_path() -> str:
    """Build a timestamped log path under the system temp directory."""
    log_dir = Path(tempfile.gettempdir()) / "fluent-command"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"fcmd_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """Load settings from the environment."""
    log_debug = _parse_bool(os.environ.get("FCMD_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        read_chunk_size=_parse_chunk_size(os.environ.get("FCMD_READ_CHUNK_SIZE")),
        encoding_errors=_parse_encoding_errors(os.environ.get("FCMD_ENCODING_ERRORS")),
        log_debug=log_debug,
        log_file=log_file,
    )


# Global config instance (loaded lazily)
_config: Config | None = None

_debug_handler: logging.Handler | None = None


def get_config() -> Config:
    """Return the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload the global config (used by tests)."""
    global _config
    _config = load_config()
    return _config


def configure_debug_logging(config: Config) -> None:
    """Attach a debug file handler to the package logger when enabled.

    Idempotent: at most one handler is ever installed.
    """
    global _debug_handler
    if not (config.log_debug and config.log_file) or _debug_handler is not None:
        return

    handler = logging.FileHandler(config.log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger = logging.getLogger("fluent_command")
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)
    _debug_handler = handler
    package_logger.debug(f"Debug logging enabled: {config}")
