"""Coloured console logging.

Usage mirrors the rest of the package::

    from parseq_prompts.utils.logging import log
    log.info("Imported 3 prompts", log.GREEN)

Messages go through the stdlib logger named ``parseq_prompts`` so host
applications can reroute or silence them. Colour codes are only emitted when
the stream is a terminal and NO_COLOR is unset.
"""

import logging
import os
import sys

BOLD = "\033[1m"
UNDERLINE = "\033[4m"
ITALIC = "\033[3m"

RED = "\033[91m"
ORANGE = "\033[38;5;208m"
YELLOW = "\033[93m"
GREEN = "\033[92m"
BLUE = "\033[94m"
PURPLE = "\033[95m"

RESET_COLOR = "\033[0m"

LOGGER_NAME = "parseq_prompts"

_logger = logging.getLogger(LOGGER_NAME)


def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def _colorize(message: str, color: str | None) -> str:
    if not color or not _use_color():
        return message
    return f"{color}{message}{RESET_COLOR}"


def set_level(level: str) -> None:
    """Set the package log level by name ("DEBUG", "INFO", ...)."""
    upper = level.upper()
    numeric = logging.getLevelName(upper)
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level!r}")
    _logger.setLevel(numeric)


def debug(message: str, color: str | None = None) -> None:
    _logger.debug(_colorize(message, color))


def info(message: str, color: str | None = None) -> None:
    _logger.info(_colorize(message, color))


def warning(message: str, color: str | None = YELLOW) -> None:
    _logger.warning(_colorize(message, color))


def error(message: str, color: str | None = RED) -> None:
    _logger.error(_colorize(message, color))
