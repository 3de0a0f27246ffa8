"""
Logging utilities for consistent logging across the solver.
"""

import logging
import sys
from typing import Optional
from pomdpsolve.config import Config


def setup_logger(
    name: str,
    level: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger writing to stdout with the configured format.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (defaults to Config.LOG_LEVEL)
        format_string: Custom format string (defaults to Config.LOG_FORMAT)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level = level or Config.LOG_LEVEL
    format_string = format_string or Config.LOG_FORMAT
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(format_string))

    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance (creates one if it doesn't exist).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name)

    return logger


def set_level(level: str) -> None:
    """Change the level of every solver logger already created."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    for name in list(logging.Logger.manager.loggerDict):
        if name.startswith(("pomdpsolve", "scripts", "__main__")):
            logger = logging.getLogger(name)
            logger.setLevel(numeric_level)
            for handler in logger.handlers:
                handler.setLevel(numeric_level)
