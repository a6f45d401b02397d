"""Logging configuration for the hierarchy tools.

The tree engine logs through loguru; ErpApi logs its requests through the
stdlib ``api`` logger. Both follow the same verbosity switch.
"""

import logging
import sys

from loguru import logger

API_LOGGER_NAME = "api"


def configure_logging(*, verbose: bool = False) -> None:
    """Route loguru to stderr and set the ``api`` logger to the same level."""
    level = "DEBUG" if verbose else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level, format="{level.icon} {message}")

    logging.basicConfig(format="[%(levelname).1s] %(name)s: %(message)s")
    logging.getLogger(API_LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)
