"""Logging setup for the planner service."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
HANDLER_NAME = "planner"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the ``planner`` logger.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger("planner")
    logger.setLevel(level.upper())
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
