"""Logging setup for the ``metapull`` package logger."""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _configured(handler: logging.Handler, level: int, format_string: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``metapull`` logger.

    Records go to stderr, so JSON written to stdout stays machine-readable,
    and to ``log_file`` when one is given. The logger does not propagate to
    the root logger. Without ``force`` the handlers from an earlier call are
    kept and only the logger level changes.

    Args:
        level: Level name, case-insensitive (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives the same records
        format_string: Optional format for both handlers
        force: Replace existing handlers

    Returns:
        The configured logger

    Raises:
        ValueError: If level is not one of the names above
    """
    name = level.upper()
    if name not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'; expected one of {', '.join(LEVELS)}")

    numeric_level = getattr(logging, name)
    format_string = format_string or DEFAULT_FORMAT

    logger = logging.getLogger("metapull")
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

        logger.addHandler(_configured(logging.StreamHandler(sys.stderr), numeric_level, format_string))
        if log_file:
            logger.addHandler(_configured(logging.FileHandler(log_file), numeric_level, format_string))

    logger.propagate = False
    return logger
