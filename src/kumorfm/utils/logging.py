"""Logging helpers for kumorfm."""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "kumorfm"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the kumorfm namespace.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Configure the kumorfm root logger.

    Safe to call more than once; the existing stream handler is reused and
    pointed at the current sys.stderr.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        fmt: Optional log format string
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = next(
        (h for h in root.handlers if getattr(h, "_kumorfm_handler", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler._kumorfm_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    else:
        handler.setStream(sys.stderr)

    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
