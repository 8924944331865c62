"""Logging configuration for the application."""

import logging
import sys

from project_cache.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure application-wide logging on stdout.

    Level resolution: explicit level argument, then DEBUG when
    settings.debug is True, then settings.log_level. The redis client's
    own loggers stay at WARNING unless debugging.
    """
    settings = get_settings()
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        logging.getLogger("redis").setLevel(logging.WARNING)
