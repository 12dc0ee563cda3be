"""Tests for logging levels and handler setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from medstock.utils.logging import configure_logging, get_log_level


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestLogLevel:
    @pytest.mark.parametrize(
        "env,expected",
        [("production", "INFO"), ("staging", "INFO"), ("development", "DEBUG"), ("test", "WARNING")],
    )
    def test_level_follows_environment(self, monkeypatch, env, expected):
        monkeypatch.setenv("PROTEAN_ENV", env)
        assert get_log_level() == expected

    def test_defaults_to_development(self):
        assert get_log_level() == "DEBUG"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"

    def test_env_takes_precedence_over_protean_env(self, monkeypatch):
        monkeypatch.setenv("ENV", "staging")
        monkeypatch.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "INFO"


class TestConfigureLogging:
    @pytest.fixture()
    def root_handlers(self):
        root = logging.getLogger()
        saved, saved_level = list(root.handlers), root.level
        yield root
        for handler in root.handlers:
            handler.close()
        root.handlers = saved
        root.setLevel(saved_level)

    def test_console_and_rotating_files(self, tmp_path, root_handlers):
        configure_logging(log_dir=str(tmp_path), log_file_prefix="ledger")

        files = sorted(
            Path(h.baseFilename).name for h in root_handlers.handlers if isinstance(h, RotatingFileHandler)
        )
        assert files == ["ledger.log", "ledger_error.log"]
        assert len(root_handlers.handlers) == 3

    def test_error_file_only_takes_errors(self, tmp_path, root_handlers):
        configure_logging(log_dir=str(tmp_path), log_file_prefix="ledger")

        error_handler = next(
            h
            for h in root_handlers.handlers
            if isinstance(h, RotatingFileHandler) and h.baseFilename.endswith("ledger_error.log")
        )
        assert error_handler.level == logging.ERROR

    def test_protean_logger_is_quieted(self, tmp_path, root_handlers):
        configure_logging(log_dir=str(tmp_path))

        assert logging.getLogger("protean").level == logging.WARNING
