"""
Package logger setup.

Entrypoints call ``configure_logging(settings.log_level)`` once. Library
modules only call ``get_logger(__name__)``; until an entrypoint configures
logging the package stays silent.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

_PKG_LOGGER_NAME = "expense_tracker"
_CONFIGURED = False


def _level(name: str) -> int:
    # Unknown names fall back to INFO rather than failing startup.
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "INFO", stream: IO[str] = sys.stderr) -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.handlers = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_level(level))
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
