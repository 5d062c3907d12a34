"""Diagnostic logging for the command line.

Diagnostics go to stderr through rich; data output never does.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "snote_grep"

err_console = Console(stderr=True)


def configure_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Attach a stderr RichHandler to the package logger (once) and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=err_console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    if verbose:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.ERROR)
    else:
        logger.setLevel(logging.WARNING)
    return logger
