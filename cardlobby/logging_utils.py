"""
Logging helpers.

Every module logs under the "cardlobby" namespace, so the server's own
output can be tuned without touching uvicorn's loggers.

    LOG_LEVEL=DEBUG    room lifecycle plus dropped frames and sends
    LOG_LEVEL=INFO     room lifecycle only (default)
"""

import logging
import os

NAMESPACE = "cardlobby"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"


def resolve_level(level: str) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Attach a stderr handler to the cardlobby namespace and set its level.

    Safe to call more than once: the handler is only added the first time.
    """
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(resolve_level(level))
    if not any(getattr(h, "_cardlobby", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        handler._cardlobby = True
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{NAMESPACE}.{name}")
