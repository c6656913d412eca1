"""Logging infrastructure for TrackMyExts.

``trackmyexts watch`` usually runs for hours while ``sync`` and
``restore`` are started next to it, and all of them append to the same
rotating log file. File records therefore carry the process id so the
interleaved lines of each command can be told apart.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

# Log level mapping for environment variable
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_LEVEL_ENV_VAR = "TRACKMYEXTS_LOG_LEVEL"

# Parent of every module logger (TrackMyExts.<area>)
ROOT_LOGGER_NAME = "TrackMyExts"

# Default log file location, shared by all commands
DEFAULT_LOG_DIR = Path.home() / ".trackmyexts" / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "trackmyexts.log"

# Log file settings
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

# Record formats
FILE_LOG_FORMAT = "%(asctime)s [%(process)d] %(name)s - %(levelname)s - %(message)s"
PLAIN_CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def get_log_level_from_env() -> int:
    """Get logging level from the TRACKMYEXTS_LOG_LEVEL environment variable.

    Returns:
        Logging level constant. Defaults to WARNING if not set or invalid.
    """
    level_str = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.WARNING)


def get_default_log_file() -> Path:
    """Get the default log file path, creating directory if needed."""
    DEFAULT_LOG_DIR.mkdir(parents=True, exist_ok=True)
    return DEFAULT_LOG_FILE


def _file_handler(log_file: Path) -> logging.Handler:
    # Parent may be a custom location that does not exist yet
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    # The file keeps everything, whatever the console shows
    handler.setLevel(logging.DEBUG)
    return handler


def _console_handler(level: int, rich_console: bool) -> logging.Handler:
    if rich_console:
        return RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
            level=level,  # Console respects configured level
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(PLAIN_CONSOLE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(
    level: int | None = None,
    log_file: Path | None = None,
    console_output: bool = True,
    rich_console: bool = True,
    file_logging: bool = True,
) -> None:
    """Configure logging for TrackMyExts.

    The console level is resolved from, in order: the explicit ``level``
    argument, the TRACKMYEXTS_LOG_LEVEL environment variable, WARNING.
    The rotating log file always records DEBUG and above.

    Args:
        level: Console logging level. If None, uses env var or default.
        log_file: Custom file path for log output. If None, uses default.
        console_output: Show logs on console.
        rich_console: Use Rich for console formatting.
        file_logging: Write logs to file.
    """
    handlers: list[logging.Handler] = []

    # Determine log level
    if level is None:
        level = get_log_level_from_env()

    if file_logging:
        handlers.append(_file_handler(log_file or get_default_log_file()))

    if console_output:
        handlers.append(_console_handler(level, rich_console))

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    # DEBUG here so the file handler sees everything
    root_logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()

    for handler in handlers:
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (will be prefixed with 'TrackMyExts.').

    Returns:
        A configured Logger instance.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
