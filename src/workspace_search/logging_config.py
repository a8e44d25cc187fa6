"""Logging configuration for workspace search."""

import sys

from loguru import logger

_PLAIN_FORMAT = "{level.icon} {message}"
_VERBOSE_FORMAT = "{time:HH:mm:ss.SSS} {level.icon} {name}: {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Send loguru output to stderr; verbose adds timestamps and module names."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=_PLAIN_FORMAT)
