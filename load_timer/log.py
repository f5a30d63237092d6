# load_timer/log.py
"""
Logging helpers.

Every module grabs its logger with setup_logger(__name__) at import time.
Nothing is emitted until configure_logging() attaches a handler to the
package logger (the CLI does this; library users can use their own setup).
"""
from __future__ import annotations

import logging
from typing import Optional, Union

PACKAGE_LOGGER = "load_timer"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _coerce_level(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: Union[int, str, None] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling it again replaces the previously installed handler instead of
    stacking a second one.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_coerce_level(level))

    for h in list(logger.handlers):
        if getattr(h, "_load_timer_handler", False):
            logger.removeHandler(h)
            h.close()

    h = handler or logging.StreamHandler()
    h.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    h._load_timer_handler = True  # type: ignore[attr-defined]
    logger.addHandler(h)
    logger.propagate = False
    return logger
