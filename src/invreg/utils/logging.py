"""
logging.py
----------

Logging configuration for invreg.

Every module obtains its logger through ``configure_logging(__name__)``.
Records go through a rich console handler; the level is read from the
``LOG_LEVEL`` environment variable (DEBUG, INFO, WARNING, ERROR, CRITICAL),
falling back to INFO for unknown values.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_console_theme = Theme(
    {
        "logging.level.info": "dim cyan",
        "logging.level.warning": "magenta",
        "logging.level.error": "bold red",
        "logging.level.debug": "green",
    }
)


def _log_level() -> str:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    if level not in VALID_LOG_LEVELS:
        level = "INFO"
    return level


def configure_logging(logger_name: str = "invreg") -> logging.Logger:
    """
    Return a logger that writes through a rich handler.

    The handler is attached to the package root logger ("invreg") once;
    child loggers propagate to it, so repeated calls do not duplicate output.

    Parameters
    ----------
    logger_name : str, default="invreg"
        Usually ``__name__`` of the calling module.

    Returns
    -------
    logging.Logger
    """
    level = _log_level()
    root = logging.getLogger("invreg")
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(
            console=Console(theme=_console_theme, stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)
    root.setLevel(level)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger
