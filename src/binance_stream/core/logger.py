"""
Logging for binance-stream.

Modules call get_logger(__name__). Loggers inside the package are children
of the "binance_stream" logger, which owns the handlers: a coloured console
handler plus, when requested, a rotating file. configure_logging()
re-targets all of them at once, e.g. from AppConfig.log_level/log_file.

Loggers outside the package get their own handlers on first use.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "binance_stream"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class Colors:
    """ANSI escape codes."""
    RESET = "\033[0m"
    GRAY = "\033[90m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.BOLD + Colors.RED,
}


class ColoredFormatter(logging.Formatter):
    """Wraps each console line in its level's colour."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno, Colors.RESET)
        return f"{color}{super().format(record)}{Colors.RESET}"


class PlainFormatter(logging.Formatter):
    """File output, no escape codes."""


def resolve_level(level: int | str | None) -> int:
    """
    Normalise a level name or number; None reads LOG_LEVEL.

    Unknown names fall back to INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def _file_handler(path: str | Path, level: int) -> logging.Handler:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(PlainFormatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int | str | None = None,
    log_file: str | Path | None = None,
    replace: bool = False,
) -> logging.Logger:
    """
    Attach console (and optional file) handlers to a logger.

    A logger that already has handlers is returned untouched unless
    replace is True, in which case its handlers are closed and rebuilt.

    Args:
        name: Logger name
        level: Level name or number; defaults to LOG_LEVEL, then INFO
        log_file: Rotating log file (10 MB x 5); defaults to LOG_FILE, and
                  no file is written when neither is set
        replace: Rebuild existing handlers

    Returns:
        The configured logger

    Example:
        >>> setup_logger("binance_stream", level="DEBUG", log_file="logs/stream.log")
    """
    logger = logging.getLogger(name)
    if logger.handlers and not replace:
        return logger

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = resolve_level(level)
    logger.setLevel(level)
    logger.addHandler(_console_handler(level))

    log_file = log_file or os.getenv("LOG_FILE") or None
    if log_file:
        logger.addHandler(_file_handler(log_file, level))

    logger.propagate = False
    return logger


def configure_logging(
    level: int | str | None = None,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Rebuild the package logger's handlers with a new level and file."""
    return setup_logger(PACKAGE_LOGGER, level, log_file, replace=True)


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module.

    Package modules share the package logger's handlers; anything else is
    set up on its own.
    """
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        setup_logger(PACKAGE_LOGGER)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        setup_logger(name)
    return logger
