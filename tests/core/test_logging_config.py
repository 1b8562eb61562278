"""Tests for logging configuration."""

from __future__ import annotations

import logging

import pytest

from readloop.core.logging_config import HANDLER_NAME, configure_logging


@pytest.fixture(autouse=True)
def readloop_logger(monkeypatch):
    """Put the readloop logger back the way it was after each test."""
    for name in ("READLOOP_LOG_LEVEL", "READLOOP_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    logger = logging.getLogger("readloop")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def own_handlers(logger):
    return [h for h in logger.handlers if h.get_name() == HANDLER_NAME]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_defaults_to_warning_on_stderr(self, readloop_logger):
        assert configure_logging() is readloop_logger
        assert readloop_logger.level == logging.WARNING
        [handler] = own_handlers(readloop_logger)
        assert isinstance(handler, logging.StreamHandler)

    def test_level_argument(self, readloop_logger):
        configure_logging(level="debug")
        assert readloop_logger.level == logging.DEBUG

    def test_level_from_env(self, readloop_logger, monkeypatch):
        monkeypatch.setenv("READLOOP_LOG_LEVEL", "ERROR")
        configure_logging()
        assert readloop_logger.level == logging.ERROR

    def test_argument_wins_over_env(self, readloop_logger, monkeypatch):
        monkeypatch.setenv("READLOOP_LOG_LEVEL", "ERROR")
        configure_logging(level="INFO")
        assert readloop_logger.level == logging.INFO

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_reconfigure_replaces_own_handlers(self, readloop_logger):
        """A second call swaps its handlers and keeps everyone else's."""
        foreign = logging.NullHandler()
        readloop_logger.addHandler(foreign)

        configure_logging(level="INFO")
        configure_logging(level="DEBUG")

        assert len(own_handlers(readloop_logger)) == 1
        assert foreign in readloop_logger.handlers
        assert readloop_logger.level == logging.DEBUG

    def test_file_handler(self, readloop_logger, tmp_path):
        """Logs also go to the requested file."""
        log_file = tmp_path / "readloop.log"
        configure_logging(level="INFO", file_path=str(log_file))

        logging.getLogger("readloop.core.resilience").info("read_retry: attempt=1")
        for handler in own_handlers(readloop_logger):
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "INFO" in text
        assert "readloop.core.resilience: read_retry: attempt=1" in text

    def test_file_from_env(self, readloop_logger, monkeypatch, tmp_path):
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("READLOOP_LOG_FILE", str(log_file))
        configure_logging()
        assert any(isinstance(h, logging.FileHandler) for h in own_handlers(readloop_logger))
