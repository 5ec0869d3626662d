"""File logging for the ``mailaddr`` logger hierarchy.

Modules only create their own loggers. A session built with a log directory
calls :func:`configure_logging`, which attaches a daily rotating
``mailaddr.log`` to the package logger; the host application's root
handlers are left alone.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Union

PACKAGE_LOGGER = "mailaddr"
LOG_FILE = "mailaddr.log"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _level(value: Union[int, str, None]) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _file_handler(logger: logging.Logger, path: Path) -> logging.Handler | None:
    target = os.path.abspath(path)
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return handler
    return None


def configure_logging(log_dir: Union[str, Path], level: Union[int, str, None] = "INFO") -> logging.Logger:
    """Write ``mailaddr.*`` records at ``level`` and above to ``log_dir``.

    Calling it again for the same directory only updates the level, so every
    session of a process may pass its configuration through here.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level(level))
    path = Path(log_dir) / LOG_FILE
    if _file_handler(logger, path) is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(path, when="midnight", backupCount=7, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger


__all__ = ["LOG_FILE", "PACKAGE_LOGGER", "configure_logging"]
