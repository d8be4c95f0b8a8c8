"""Centralised logging helpers for miniyaml."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

_LOGGER_CACHE: Dict[str, logging.Logger] = {}

LOG_LEVEL_ENV = "MINIYAML_LOG_LEVEL"

_LEVEL_MAP = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


def get_logger(name: str = "miniyaml") -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""

    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]


def resolve_log_level(level: Optional[str] = None) -> int:
    """Map a level name (or ``MINIYAML_LOG_LEVEL``) to a logging constant."""
    name = (level or os.getenv(LOG_LEVEL_ENV, 'warning')).lower()
    return _LEVEL_MAP.get(name, logging.WARNING)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a console handler to the ``miniyaml`` logger."""
    logger = get_logger("miniyaml")
    logger.setLevel(resolve_log_level(level))

    # Add console handler if not already present
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False

    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_log_level"]
