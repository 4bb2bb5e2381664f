"""
Logging setup for recsort.

Every module logs through `logging.getLogger(__name__)`, so all records land
under the "recsort" namespace. Nothing is configured on import; call
`configure_logging()` to attach a rich console handler.
"""

from __future__ import annotations

import logging
from typing import Union

from rich.logging import RichHandler

LOGGER_NAME = "recsort"

__all__ = ["LOGGER_NAME", "configure_logging"]

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Attach a RichHandler to the "recsort" logger and set its level.

    Calling this more than once replaces the previous rich handler instead of
    stacking duplicates.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, RichHandler):
            logger.removeHandler(h)
    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
