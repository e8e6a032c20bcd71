"""Logging configuration for doclinks.

Log records from every ``doclinks.*`` module go to stderr through a Rich
handler, so they never interleave with result tables printed on stdout.
Probe traffic itself is logged by httpx under the ``httpx`` logger; it is
only attached when ``http_debug`` is requested.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "doclinks"
HTTP_LOGGER_NAME = "httpx"

FILE_FORMAT = "%(asctime)s | %(levelname)-5s | [%(name)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_console_handler: logging.Handler | None = None
_console_level = logging.INFO


def _make_console_handler(rich_console: bool) -> logging.Handler:
    if not rich_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        return handler
    # URLs contain [brackets] often enough that markup must stay off
    return RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )


def _make_file_handler(log_file: Path | str) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_file: Path | str | None = None,
    rich_console: bool = True,
    quiet_console: bool = False,
    http_debug: bool = False,
) -> logging.Logger:
    """
    Configure the ``doclinks`` logger tree.

    Calling it again replaces the previous handlers.

    Args:
        log_level: Level name; unknown names fall back to INFO
        log_file: Also write every DEBUG record here
        rich_console: Use RichHandler instead of a plain stream handler
        quiet_console: Console shows WARNING+ only, keeping result tables clean
        http_debug: Route httpx request logs through the same handlers

    Returns:
        The ``doclinks`` logger
    """
    global _console_handler, _console_level
    level = getattr(logging, log_level.upper(), logging.INFO)

    console_handler = _make_console_handler(rich_console)
    console_handler.setLevel(logging.WARNING if quiet_console else level)
    handlers = [console_handler]
    if log_file:
        handlers.append(_make_file_handler(log_file))

    logger = logging.getLogger(LOGGER_NAME)
    # The file handler wants DEBUG records even when the console shows less
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.handlers.clear()
    for handler in handlers:
        logger.addHandler(handler)

    http_logger = logging.getLogger(HTTP_LOGGER_NAME)
    http_logger.handlers.clear()
    if http_debug:
        http_logger.setLevel(logging.DEBUG)
        for handler in handlers:
            http_logger.addHandler(handler)
    else:
        http_logger.setLevel(logging.NOTSET)

    _console_handler = console_handler
    _console_level = level
    return logger


def set_console_quiet(quiet: bool = True) -> None:
    """
    Toggle quiet mode for console logging.

    When quiet, only WARNING and above reach the console; otherwise the
    level given to setup_logging() applies again. The log file, if any,
    still receives everything.
    """
    if _console_handler is not None:
        _console_handler.setLevel(logging.WARNING if quiet else _console_level)
