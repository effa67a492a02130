"""
Logging setup.

Everything goes to stderr: on the stdio transport stdout carries the
protocol stream and must stay clean.
"""

import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "fetch_markdownify"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level, as int or name ("DEBUG", "info", ...)
        log_format: Custom format string (optional)

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format or DEFAULT_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Avoid duplicate lines when called more than once
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger
