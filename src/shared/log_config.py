"""Logging setup for processes embedding sitecontent.

The library itself only creates module loggers. Call ``setup_logging()``
once at startup (build script or server entry point) to route them.

Usage:
    from sitecontent.shared.log_config import setup_logging
    setup_logging(config.logging.level)
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "sitecontent"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the ``sitecontent`` logger.

    Sets the level and attaches a stderr handler unless one is already
    attached. Safe to call more than once.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_parse_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def _parse_level(level: str | int) -> int:
    """Convert a level name to its numeric value, defaulting to INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO
