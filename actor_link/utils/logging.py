"""Logging setup for the actor_link package logger."""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "actor_link"
LOG_FORMAT = '%(asctime)s %(levelname)-8s %(name)s: %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``actor_link`` logger, leaving the root logger alone.

    Calling it again replaces the handlers it installed before, so an app
    factory can be invoked repeatedly without duplicating output.

    Args:
        level: Logging level for every actor_link module
        log_file: Optional log file path
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_actor_link", False):
            logger.removeHandler(handler)
            handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._actor_link = True
        logger.addHandler(handler)

    return logger
