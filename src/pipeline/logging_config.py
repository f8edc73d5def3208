from __future__ import annotations

import logging
import sys

LOGGER_NAME = "invoice_ocr"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stderr handler to the project logger.

    stdout is left to the JSON results. Calling this twice only updates the level.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(LOG_LEVELS.get(level.upper(), logging.INFO))
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
