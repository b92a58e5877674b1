"""Logging setup shared by the AI client layer.

Every module obtains its logger through ``setup_logger(__name__)``. Console
output is kept quiet (warnings and errors only) unless verbose mode is
requested, while an optional log file receives full detail.
"""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Optional

__all__ = [
    "setup_logger",
    "set_log_level",
    "setup_file_handler",
    "enable_verbose_logging",
]

DEFAULT_LOG_LEVEL = logging.INFO
USER_LOG_LEVEL = logging.WARNING
DETAILED_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"
SIMPLE_FORMAT = "[%(levelname)s] %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers created through setup_logger, so verbosity can be changed globally
_MANAGED_LOGGERS: set[str] = set()


def setup_logger(
    name: str,
    level: int = DEFAULT_LOG_LEVEL,
    format_string: Optional[str] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Create or fetch a logger with a single stderr handler.

    Args:
        name: Logger name, normally ``__name__`` of the calling module
        level: Level of the logger itself
        format_string: Optional console format (defaults to SIMPLE_FORMAT)
        verbose: Show ``level`` and above on the console instead of warnings only

    Returns:
        Configured Logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.warning("Shown on the console")
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level if verbose else USER_LOG_LEVEL)
        console_handler.setFormatter(
            logging.Formatter(
                fmt=format_string or SIMPLE_FORMAT,
                datefmt=DEFAULT_DATE_FORMAT,
            )
        )
        logger.addHandler(console_handler)
        logger.setLevel(level)
        logger.propagate = False

    _MANAGED_LOGGERS.add(name)
    return logger


def setup_file_handler(
    logger: logging.Logger,
    log_file_path: str,
    level: int = logging.DEBUG,
) -> None:
    """Attach a detailed file handler to ``logger``."""
    file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    )
    logger.addHandler(file_handler)


def set_log_level(logger: logging.Logger, level: int) -> None:
    """Change the level of a logger and all of its handlers."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def enable_verbose_logging(
    level: int = logging.DEBUG,
    names: Optional[Iterable[str]] = None,
) -> None:
    """
    Lower the level of every managed logger (or only ``names``).

    Used by the command line runner's ``--verbose`` flag.
    """
    targets = list(names) if names is not None else sorted(_MANAGED_LOGGERS)
    for name in targets:
        set_log_level(logging.getLogger(name), level)
