# MIT License (see LICENSE)
"""
Logging configuration.

Every module logs through logging.getLogger(__name__), so all records flow
into the dedicated "particle_sim" logger. setup_logging() attaches handlers
to that logger only, leaving the root logger and third-party libraries alone.
"""
from __future__ import annotations
import logging
import os

LOGGER_NAME = "particle_sim"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: int | str = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    log_file: str | None = None,
) -> logging.Logger:
    """
    Configure the "particle_sim" logger.

    Logs go to the console and, if log_file is given, to that file (its
    directory is created). Calling again replaces the previous handlers.

    Args:
        level: Logging level name or number.
        fmt: logging.Formatter format string.
        log_file: Optional path of a log file.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False

    formatter = logging.Formatter(fmt)

    if logger.hasHandlers():
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized (level=%s, file=%s)", logging.getLevelName(logger.level), log_file)
    return logger
