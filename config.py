"""Configuration loaded from GETIME_* environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from models import Config

logger = logging.getLogger(__name__)

LOCALES = ("fr", "en")
HOURS_FORMATS = ("hm", "decimal")


def load_config() -> Config:
    """Build a Config from the environment, ignoring unsupported values."""
    config = Config()

    if locale := os.environ.get("GETIME_LOCALE"):
        if locale in LOCALES:
            config.locale = locale
        else:
            logger.warning("Unsupported GETIME_LOCALE %r, using %r", locale, config.locale)

    if hours_format := os.environ.get("GETIME_HOURS_FORMAT"):
        if hours_format in HOURS_FORMATS:
            config.hours_format = hours_format
        else:
            logger.warning(
                "Unsupported GETIME_HOURS_FORMAT %r, using %r", hours_format, config.hours_format
            )

    if log_level := os.environ.get("GETIME_LOG_LEVEL"):
        config.log_level = log_level.upper()

    if data_path := os.environ.get("GETIME_DATA"):
        config.data_path = Path(data_path)

    return config
