# catalog/utils/logger.py
import logging
import os
import sys

logger = logging.getLogger("catalog")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(_handler)
logger.propagate = False


def configure_logging(level):
    logger.setLevel((level or "INFO").upper())


def get_logger(name=None):
    """Child of the ``catalog`` logger, e.g. ``catalog.discounts``."""
    return logging.getLogger(f"catalog.{name}") if name else logger
