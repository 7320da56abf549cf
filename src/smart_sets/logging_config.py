"""Central logging configuration for the smart-sets CLI."""

from __future__ import annotations

import logging
from logging.config import dictConfig

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def _stderr_handler() -> RichHandler:
    # stdout is reserved for command output (--json)
    return RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)


def _default_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {
                "format": "%(name)s: %(message)s",
                "datefmt": "[%X]",
            },
        },
        "handlers": {
            "console": {
                "()": _stderr_handler,
                "formatter": "rich",
                "level": level,
            },
        },
        "loggers": {
            "smart_sets": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure smart-sets logging once per process.

    Later calls only change the level, so a repeated CLI invocation in the
    same process (tests) can still switch verbosity.
    """
    global _configured
    level = level.upper()
    if _configured:
        logger = logging.getLogger("smart_sets")
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    dictConfig(_default_config(level))
    _configured = True
