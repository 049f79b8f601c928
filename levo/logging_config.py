"""Logging setup for levo.

All modules obtain their logger through :func:`get_logger` so that a single
call to :func:`setup_logging` (made by the CLI entry point) controls level and
formatting for the whole package.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "levo"

_configured = False


def setup_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Configure the package logger with a Rich handler on stderr.

    Args:
        level: Logging level name or number.

    Returns:
        The configured root ``levo`` logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``levo``.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
