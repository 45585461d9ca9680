"""Logging configuration helpers."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install the service-wide log format on the root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger for the coach service."""
    return logging.getLogger(name or "vocab_coach")
