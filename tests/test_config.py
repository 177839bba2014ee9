"""Config module tests.

Covers FCMD_* environment variable parsing and the debug log handler.
"""

from __future__ import annotations

import logging
import os
from unittest import mock

import pytest

from fluent_command import config as config_module
from fluent_command.config import (
    DEFAULT_READ_CHUNK_SIZE,
    MAX_READ_CHUNK_SIZE,
    Config,
    configure_debug_logging,
    get_config,
    load_config,
    reload_config,
)


class TestReadChunkSize:
    """FCMD_READ_CHUNK_SIZE parsing."""

    def test_default(self):
        assert load_config().read_chunk_size == DEFAULT_READ_CHUNK_SIZE

    def test_custom(self):
        with mock.patch.dict(os.environ, {"FCMD_READ_CHUNK_SIZE": "512"}, clear=False):
            assert load_config().read_chunk_size == 512

    @pytest.mark.parametrize(
        "value,expected",
        [("0", 1), ("-10", 1), (str(MAX_READ_CHUNK_SIZE * 4), MAX_READ_CHUNK_SIZE)],
    )
    def test_clamped(self, value: str, expected: int):
        with mock.patch.dict(os.environ, {"FCMD_READ_CHUNK_SIZE": value}, clear=False):
            assert load_config().read_chunk_size == expected

    @pytest.mark.parametrize("value", ["", "abc", "1.5"])
    def test_invalid_falls_back(self, value: str):
        with mock.patch.dict(os.environ, {"FCMD_READ_CHUNK_SIZE": value}, clear=False):
            assert load_config().read_chunk_size == DEFAULT_READ_CHUNK_SIZE


class TestEncodingErrors:
    """FCMD_ENCODING_ERRORS parsing."""

    def test_default_replace(self):
        assert load_config().encoding_errors == "replace"

    @pytest.mark.parametrize("value", ["ignore", "IGNORE", " backslashreplace "])
    def test_valid(self, value: str):
        with mock.patch.dict(os.environ, {"FCMD_ENCODING_ERRORS": value}, clear=False):
            assert load_config().encoding_errors == value.strip().lower()

    @pytest.mark.parametrize("value", ["strict", "bogus"])
    def test_invalid_falls_back(self, value: str):
        with mock.patch.dict(os.environ, {"FCMD_ENCODING_ERRORS": value}, clear=False):
            assert load_config().encoding_errors == "replace"


class TestLogDebug:
    """FCMD_LOG_DEBUG and the debug file handler."""

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "on"])
    def test_truthy_values(self, value: str):
        with mock.patch.dict(os.environ, {"FCMD_LOG_DEBUG": value}, clear=False):
            config = load_config()
            assert config.log_debug is True
            assert config.log_file is not None
            assert config.log_file.endswith(".log")

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", ""])
    def test_falsy_values(self, value: str):
        with mock.patch.dict(os.environ, {"FCMD_LOG_DEBUG": value}, clear=False):
            config = load_config()
            assert config.log_debug is False
            assert config.log_file is None

    def test_handler_installed_once(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "_debug_handler", None)
        package_logger = logging.getLogger("fluent_command")
        before = list(package_logger.handlers)
        config = Config(log_debug=True, log_file=str(tmp_path / "debug.log"))

        try:
            configure_debug_logging(config)
            configure_debug_logging(config)
            added = [h for h in package_logger.handlers if h not in before]
            assert len(added) == 1
            assert (tmp_path / "debug.log").read_text(encoding="utf-8")
        finally:
            for handler in package_logger.handlers:
                if handler not in before:
                    package_logger.removeHandler(handler)
                    handler.close()
            package_logger.setLevel(logging.NOTSET)

    def test_disabled_installs_nothing(self, monkeypatch):
        monkeypatch.setattr(config_module, "_debug_handler", None)
        package_logger = logging.getLogger("fluent_command")
        before = list(package_logger.handlers)

        configure_debug_logging(Config())

        assert package_logger.handlers == before


class TestGlobalConfig:
    """Lazy global instance."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_picks_up_environment(self):
        with mock.patch.dict(os.environ, {"FCMD_READ_CHUNK_SIZE": "64"}, clear=False):
            assert reload_config().read_chunk_size == 64
            assert get_config().read_chunk_size == 64

    def test_repr(self):
        assert repr(Config()) == (
            "Config(read_chunk_size=4096, encoding_errors=replace, "
            "log_debug=False, log_file=None)"
        )
