"""Logging for forecash.

Modules log through ``get_logger("forecash.<module>")``. Only the CLI calls
``configure_logging``; until then records go to a ``NullHandler`` so importing
the package stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "forecash"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONFIGURED = False

LOG_LEVEL_ENV = "FORECASH_LOG_LEVEL"


def _parse_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.WARNING
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    # Unknown names fall back to WARNING
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send ``forecash`` records to ``stream`` (stderr by default).

    ``level`` takes a number or a level name; without one the
    ``FORECASH_LOG_LEVEL`` variable decides, then WARNING. Later calls are
    ignored.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for existing in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not (_CONFIGURED or pkg_logger.handlers):
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
