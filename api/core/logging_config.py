"""
Process-wide logging configuration.

Call `setup_logging()` once at startup; modules log through
`logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging
import logging.config

from core import settings

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncpg", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    level = (level or settings.env_str("LOG_LEVEL", "INFO")).upper()
    formatter = "detailed" if settings.env_str("LOG_FORMAT", "simple") == "detailed" else "simple"

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "detailed": {
                "format": "%(asctime)s %(levelname)s %(name)s [%(filename)s:%(lineno)d] %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
    }
    logging.config.dictConfig(config)
