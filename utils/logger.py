"""
utils/logger.py
---------------
One logging setup for the bot, the services and the database layer, so HR
operations, rejected requests and database failures share a single stream.
Use `get_logger(__name__)` in every module.
"""

import logging
import sys

from config import LOG_LEVEL

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every HTTP round-trip or poll at INFO
_NOISY = ("httpx", "telegram.ext.Application", "apscheduler")

_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL.upper())
    root.addHandler(handler)

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for `name`, configuring logging on first use.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    _configure()
    return logging.getLogger(name)
