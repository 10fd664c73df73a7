"""
Structured logging utilities for the libretto library.

Provides a configured logger and helper functions for consistent logging.
The library never installs handlers on its own; call configure_logging()
from an application (the CLI does).
"""

import logging
import sys
from typing import Optional


# Default format for libretto logs
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "libretto"


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (default: "libretto")

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.INFO,
    format_string: Optional[str] = None,
    date_format: Optional[str] = None,
    stream: Optional[object] = None,
) -> logging.Logger:
    """
    Configure logging for the libretto library.

    Args:
        level: Logging level, as a number or a name like "DEBUG" (default: INFO)
        format_string: Log format string (default: DEFAULT_FORMAT)
        date_format: Date format string (default: DEFAULT_DATE_FORMAT)
        stream: Output stream (default: sys.stderr)

    Returns:
        Configured root logger for libretto
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=date_format or DEFAULT_DATE_FORMAT,
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    return logger


def enable_debug_logging() -> None:
    """Enable debug-level logging for the libretto library."""
    configure_logging(level=logging.DEBUG)


def disable_logging() -> None:
    """Disable all libretto logging."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())


# Create default logger
_logger = get_logger()


def log_classification_complete(
    cast_count: int, number_count: int, segment_count: int
) -> None:
    """Log the end of a classification pass."""
    _logger.info(
        f"Classified {number_count} numbers, {segment_count} segments "
        f"({cast_count} cast members)"
    )


def log_resolution_complete(resolved: int, total: int, warnings: int) -> None:
    """Log the end of an anchor resolution pass."""
    _logger.info(f"Resolved {resolved}/{total} track anchors ({warnings} warnings)")


def log_estimation_complete(mode: str, tracks: int, segments: int) -> None:
    """Log the end of a timing estimation pass."""
    _logger.info(f"Estimated {segments} segments across {tracks} tracks ({mode} mode)")


def log_track_estimated(
    label: str, duration: float, segments: int, weight: float
) -> None:
    """Log an individual track estimate."""
    _logger.debug(
        f"Estimated {label}: duration={duration:.1f}s, "
        f"segments={segments}, word_weight={weight:.1f}"
    )


def log_merge_complete(tracks: int, segments: int) -> None:
    """Log the end of a merge."""
    _logger.info(f"Merged {tracks} tracks, {segments} timed segments")


def log_warning(message: str, **context) -> None:
    """Log a warning with optional context."""
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        _logger.warning(f"{message} ({ctx_str})")
    else:
        _logger.warning(message)


def log_error(message: str, exc_info: bool = False, **context) -> None:
    """Log an error with optional context and exception info."""
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        _logger.error(f"{message} ({ctx_str})", exc_info=exc_info)
    else:
        _logger.error(message, exc_info=exc_info)
