"""Logging setup for anything that runs the engine as an application (UI shell, server, scripts)."""

import logging
from typing import Optional

from src.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Root logger configuration. Falls back to the level from the settings."""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
