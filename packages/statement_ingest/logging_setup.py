"""Logging for statement_ingest.

Modules log through ``get_logger("statement_ingest.<module>")`` with
``"<module>:<event> key=value"`` messages and never attach handlers. The CLI
calls :func:`configure_logging` at startup to send those records to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_ingest"
LOG_LEVEL_ENV = "STATEMENT_INGEST_LOG_LEVEL"
_HANDLER_NAME = "statement_ingest.stderr"
_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def resolve_level(level: int | str | None = None) -> int:
    """``level`` as a number; unset falls back to ``$STATEMENT_INGEST_LOG_LEVEL``, then INFO."""

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
    force: bool = False,
) -> logging.Logger:
    """Attach the stderr handler to the package logger.

    Repeat calls are no-ops unless ``force`` is set, in which case the
    handler is replaced.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    ours = [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]
    if ours and not force:
        return logger
    for h in list(logger.handlers):
        if h in ours or isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, silent until the host configures logging."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "PACKAGE_LOGGER", "configure_logging", "get_logger", "resolve_level"]
