import logging
import os
from typing import Optional, Union

from rich.logging import RichHandler

from .utils import console

LOGGER_NAME = "mrmodpack"


def setup_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Send the package's log records to the shared rich console.

    ``MRMODPACK_DEBUG=1`` forces DEBUG when no level is given.
    """
    if level is None:
        level = "DEBUG" if os.environ.get("MRMODPACK_DEBUG", "0") == "1" else "WARNING"
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_path=False, rich_tracebacks=logger.level <= logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("Debug logging enabled")
    return logger
