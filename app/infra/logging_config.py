"""Process-wide logging setup shared by the API and Celery workers."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "ephemera"

_NOISY_LOGGERS = ("sqlalchemy.engine", "celery.redirected", "httpx", "urllib3")


class LoggingConfig:
    """Configure the root logger once; later instantiations are no-ops."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        if LoggingConfig._configured:
            return
        level_name = (level or get_settings().log_level or "INFO").upper()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(level_name)

        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under the application logger."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
