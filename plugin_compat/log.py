"""Logging setup for hosts that embed the compatibility layer."""

import logging

from plugin_compat.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the standard log format at ``level`` (defaults to settings.log_level)."""
    name = (level or settings.log_level).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, name, logging.INFO),
    )
