"""
Process-wide logging setup shared by the API and the Celery workers.

Instantiate LoggingConfig once at process start; modules then use
get_logger() or logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

from app.config import get_settings

ROOT_LOGGER_NAME = "standup"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configure stdlib logging from settings (level, single console handler)."""

    def __init__(self, level: Optional[str] = None) -> None:
        self.level = (level or get_settings().log_level).upper()
        logging.config.dictConfig(self._build_config())

    def _build_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"level": self.level, "handlers": ["console"]},
            "loggers": {
                # slack_sdk logs every request body at DEBUG
                "slack_sdk": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under the application root logger."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
