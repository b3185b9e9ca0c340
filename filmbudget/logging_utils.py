"""Mini README: Application-wide logging helpers for the budget desk.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - one-shot setup of the root handler and level.
    * resolve_level - map ``FILMBUDGET_LOG_LEVEL`` (name or number) to a level.

Usage:
    Modules create ``LOGGER = get_logger(__name__)`` at import time. The root
    logger is configured once per process; SQL statement echo and per-request
    access lines stay at WARNING unless the root level is DEBUG.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LOG_LEVEL_VARIABLE = "FILMBUDGET_LOG_LEVEL"
_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")

_LOGGER_INITIALISED = False


def resolve_level(value: Union[int, str, None]) -> int:
    """Return a logging level, defaulting to INFO for unknown names."""

    if value is None:
        value = os.environ.get(LOG_LEVEL_VARIABLE, "INFO")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_root_logger(level: Union[int, str, None] = None) -> None:
    """Attach a single stream handler with a readable timestamped format."""

    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    effective_level = resolve_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(effective_level)
    root_logger.addHandler(handler)
    if effective_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger, configuring the root logger on first use."""

    configure_root_logger()
    return logging.getLogger(name)
