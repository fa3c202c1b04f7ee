"""Loguru setup for the engine and for the stdlib loggers of the libraries it drives.

SQLAlchemy reports through :mod:`logging`; those records are forwarded into loguru so
storage messages share the engine's sink and format.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} - {message}"

_LOGGING_CONFIGURED = False


class LoguruBridge(logging.Handler):
    """Re-emits stdlib log records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # walk out of the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", *, sql_level: str = "WARNING") -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(handlers=[LoguruBridge()], level=logging.NOTSET, force=True)
    logging.getLogger("sqlalchemy").setLevel(sql_level.upper())

    logger.remove()
    logger.add(
        sys.stdout,
        level=level.upper(),
        format=LOG_FORMAT,
        enqueue=True,
        diagnose=False,
        backtrace=False,
    )

    _LOGGING_CONFIGURED = True
