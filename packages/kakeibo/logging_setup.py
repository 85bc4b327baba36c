"""Logging for the ``kakeibo`` package.

Library modules obtain loggers through :func:`get_logger` and never attach
handlers; until an entrypoint calls :func:`configure_logging`, records under
``"kakeibo"`` go to a ``NullHandler``.

Environment:

- ``KAKEIBO_LOG_LEVEL``: level name or number used when no explicit level is
  passed (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "kakeibo"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``$KAKEIBO_LOG_LEVEL``) into a numeric level.

    Unknown names fall back to ``INFO``.
    """

    if level is None:
        level = os.getenv("KAKEIBO_LOG_LEVEL") or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Logger:
    """Attach one ``StreamHandler`` to the package logger; later calls are no-ops."""

    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured:
        return logger

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    # Records are handled here only, not again by the root logger.
    logger.propagate = False

    _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["PACKAGE_LOGGER", "configure_logging", "get_logger", "resolve_level"]
