"""
Logging configuration.

Configures standard-library logging once at startup via dictConfig:
  - Console handler on stdout
  - "default" and "detailed" formatters (selected by LOG_FORMAT)
  - A filter that stamps every record with the current request id

The request id comes from the X-Request-ID header (or is generated when the
header is absent) and lives in a context variable set by RequestIDMiddleware,
so log lines from the service layer can be correlated without threading the
id through every function call.
"""

import logging
import logging.config
import sys
from contextvars import ContextVar
from typing import Any

from accounts_api.config import settings

# "-" outside of a request (startup, scripts, tests calling services directly)
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    """Add `request_id` to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def get_logging_config() -> dict[str, Any]:
    """Build the dictConfig dictionary from settings."""
    formatter = "detailed" if settings.LOG_FORMAT == "detailed" else "default"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - "
                    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {
            "request_id": {
                "()": RequestIdFilter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.LOG_LEVEL,
                "formatter": formatter,
                "stream": sys.stdout,
                "filters": ["request_id"],
            },
        },
        "root": {
            "level": settings.LOG_LEVEL,
            "handlers": ["console"],
        },
        "loggers": {
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            # Set to INFO to see SQL queries
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "accounts_api": {
                "level": settings.LOG_LEVEL,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Apply the logging configuration. Call once before the app starts serving."""
    logging.config.dictConfig(get_logging_config())
    logging.getLogger(__name__).info(
        "Logging configured: level=%s, format=%s", settings.LOG_LEVEL, settings.LOG_FORMAT
    )
