"""Logging configuration for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def verbosity_to_level(verbosity: int) -> int:
    """Map the number of ``-v`` flags to a log level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0, console: Console | None = None) -> logging.Logger:
    """Send rngrename log records to a rich handler.

    Calling it again replaces the previously installed handler.
    """
    logger = logging.getLogger("rngrename")
    logger.setLevel(verbosity_to_level(verbosity))

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
