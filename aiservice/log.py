"""
Logging setup for the AI assistant service.
"""

import logging
import sys

from aiservice.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure the ``aiservice`` logger tree once, writing to stdout."""
    logger = logging.getLogger("aiservice")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
