"""Application logging utilities."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from . import config


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """(Re)attach stderr and optional rotating file handlers to the package logger.

    Safe to call once per command: handlers from an earlier call are closed
    and replaced, so the level and the stderr stream always reflect this call.
    """
    logger = logging.getLogger("notevault")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    level_name = (level or config.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_file = log_file or config.LOG_FILE
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=1_048_576,
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.debug("Logging to %s", handler.baseFilename)

    return logger
