"""Tests for logging_setup module."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from doclinks.logging_setup import set_console_quiet, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_default_setup(self) -> None:
        """Test default logging setup."""
        logger = setup_logging()
        assert logger.name == "doclinks"
        assert logger.level == logging.INFO
        assert any(isinstance(h, RichHandler) for h in logger.handlers)

    def test_custom_log_level(self) -> None:
        """Test setting custom log level."""
        logger = setup_logging(log_level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_invalid_log_level_defaults_to_info(self) -> None:
        """Test that invalid log level defaults to INFO."""
        logger = setup_logging(log_level="INVALID")
        assert logger.level == logging.INFO

    def test_case_insensitive_log_level(self) -> None:
        """Test that log level is case insensitive."""
        logger = setup_logging(log_level="warning")
        assert logger.level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self) -> None:
        """Test handlers do not pile up across calls."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_plain_console(self) -> None:
        """Test the non-rich console handler."""
        logger = setup_logging(rich_console=False)
        assert not any(isinstance(h, RichHandler) for h in logger.handlers)
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_with_log_file(self, tmp_path: Path) -> None:
        """Test logging with file output."""
        log_file = tmp_path / "nested" / "doclinks.log"
        logger = setup_logging(log_file=log_file)

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG

        logging.getLogger("doclinks.prober").info("Probe message")
        for handler in file_handlers:
            handler.flush()
        assert "Probe message" in log_file.read_text()
        assert "[doclinks.prober]" in log_file.read_text()

        for handler in file_handlers:
            handler.close()


class TestLogFileLevel:
    """Tests for DEBUG records reaching the log file."""

    def test_debug_reaches_file_at_info(self, tmp_path: Path) -> None:
        """Test the file gets DEBUG records while the console stays at INFO."""
        log_file = tmp_path / "doclinks.log"
        logger = setup_logging(log_level="INFO", log_file=log_file)

        logging.getLogger("doclinks.resolver").debug("Resolver detail")
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        for handler in file_handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.INFO
        assert "Resolver detail" in log_file.read_text()

        for handler in file_handlers:
            handler.close()

    def test_no_file_keeps_level(self) -> None:
        """Test without a log file the logger keeps the requested level."""
        assert setup_logging(log_level="WARNING").level == logging.WARNING


class TestHttpDebug:
    """Tests for routing httpx request logs."""

    def test_http_logger_attached(self) -> None:
        """Test httpx records share the doclinks handlers when requested."""
        logger = setup_logging(http_debug=True)
        http_logger = logging.getLogger("httpx")
        assert http_logger.handlers == logger.handlers
        assert http_logger.level == logging.DEBUG

    def test_http_logger_detached(self) -> None:
        """Test a later setup without http_debug removes the handlers again."""
        setup_logging(http_debug=True)
        setup_logging()
        http_logger = logging.getLogger("httpx")
        assert http_logger.handlers == []
        assert http_logger.level == logging.NOTSET


class TestConsoleQuiet:
    """Tests for quiet console mode."""

    def test_quiet_console_level(self) -> None:
        """Test quiet console only shows warnings."""
        logger = setup_logging(log_level="DEBUG", quiet_console=True)
        assert logger.handlers[0].level == logging.WARNING

    def test_set_console_quiet_toggle(self) -> None:
        """Test quiet mode can be toggled after setup."""
        logger = setup_logging()
        console_handler = logger.handlers[0]

        set_console_quiet(True)
        assert console_handler.level == logging.WARNING

        set_console_quiet(False)
        assert console_handler.level == logging.INFO

    def test_unquiet_restores_configured_level(self) -> None:
        """Test leaving quiet mode goes back to the level from setup."""
        logger = setup_logging(log_level="DEBUG", quiet_console=True)
        console_handler = logger.handlers[0]

        set_console_quiet(False)

        assert console_handler.level == logging.DEBUG
