"""Logging setup, debug state and terminal styling."""

import logging
import os
import sys
from typing import TextIO

from .constants import STRICT_ERRORS_ENV

__all__ = [
    "LogObjects",
    "get_logger",
    "init_logger",
    "is_debug",
    "is_strict",
    "set_debug",
    "set_strict",
    "should_colorize",
]

_ESC = "\x1b["
RESET = f"{_ESC}0m"


class LogStyles:
    """ANSI codes per log level."""

    WARNING = ("33", "2")
    ERROR = ("31", "2")
    CRITICAL = ("31", "1")


class _RuntimeFlags:
    """Container for mutable process flags to avoid global statement."""

    debug: bool = bool(os.environ.get("DEBUG"))
    strict: bool = bool(os.environ.get(STRICT_ERRORS_ENV))


def is_debug() -> bool:
    """Return the current debug state."""
    return _RuntimeFlags.debug


def set_debug(value: bool) -> None:
    """Set the debug state."""
    _RuntimeFlags.debug = value


def is_strict() -> bool:
    """Return True if routing errors must raise instead of being logged."""
    return _RuntimeFlags.strict


def set_strict(value: bool) -> None:
    """Set the strict errors state."""
    _RuntimeFlags.strict = value


def should_colorize(stream: TextIO | None = None) -> bool:
    """Determine if ANSI colors should be used for the given stream.

    Respects NO_COLOR, FORCE_COLOR and TTY detection.

    Args:
        stream: The output stream to check. Defaults to sys.stderr.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def _make_style(*codes: str) -> tuple[str, str]:
    return (f"{_ESC}{';'.join(codes)}m", RESET)


class LogObjects:
    """Reusable objects for loggers."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """A custom formatter, adding colors based on log level."""

    def __init__(self) -> None:
        super().__init__()
        log_format = r"%(name)12s - %(message)s // %(filename)s:%(lineno)d" if is_debug() else r"%(message)s"
        if should_colorize():
            warn_pre, warn_suf = _make_style(*LogStyles.WARNING)
            err_pre, err_suf = _make_style(*LogStyles.ERROR)
            crit_pre, crit_suf = _make_style(*LogStyles.CRITICAL)
        else:
            warn_pre = warn_suf = err_pre = err_suf = crit_pre = crit_suf = ""

        self._formatters = {
            logging.DEBUG: logging.Formatter(log_format),
            logging.INFO: logging.Formatter(log_format),
            logging.WARNING: logging.Formatter(warn_pre + log_format + warn_suf),
            logging.ERROR: logging.Formatter(err_pre + log_format + err_suf),
            logging.CRITICAL: logging.Formatter(crit_pre + log_format + crit_suf),
        }

    def format(self, record: logging.LogRecord) -> str:
        return self._formatters[record.levelno].format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "cosmolith", level: int | None = None) -> logging.Logger:
    """Return a named logger.

    Args:
        name: logger's name
        level: logger's level (auto if not set)
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" initialized', name)
    return logger
