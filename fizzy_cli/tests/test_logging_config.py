"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from fizzy_cli.logging_config import configure_logging, get_log_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogLevel:
    def test_defaults_to_warning(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert get_log_level() == logging.WARNING

    def test_reads_env_case_insensitively(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert get_log_level() == logging.WARNING


class TestConfigureLogging:
    def test_verbose_forces_debug(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        configure_logging(verbose=True)

        assert logging.getLogger("fizzy_cli").level == logging.DEBUG
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_http_loggers_stay_quiet(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        configure_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
