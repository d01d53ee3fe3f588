"""Logging setup for the cargograph command line."""

from __future__ import annotations

import logging
import sys

HANDLER_NAME = "cargograph"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    """Map the number of -v flags to a logging level."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """
    Attach a single stderr handler to the ``cargograph`` logger.

    Calling this more than once replaces the handler instead of stacking them,
    so repeated CLI invocations in one process (tests) do not duplicate lines.
    """
    logger = logging.getLogger("cargograph")
    for handler in list(logger.handlers):
        if handler.name == HANDLER_NAME:
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    logger.addHandler(handler)
    logger.setLevel(verbosity_to_level(verbosity))
    return logger
