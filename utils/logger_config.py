import logging.config
import sys
from typing import Optional

from circuit_challenge.core.config import settings


def configure_logging(level: Optional[str] = None):
    level = level or settings.LOG_LEVEL
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,

        # Formatters
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
        },

        # Handlers
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stdout,
            },
            "file": {
                "level": "ERROR",
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": settings.LOG_FILE,
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
            },
        },

        # Loggers
        "loggers": {
            "": {  # root
                "handlers": ["console", "file"],
                "level": level,
                "propagate": True
            },
            "circuit_challenge.engine": {  # one line per generation attempt at DEBUG
                "level": level,
                "propagate": True
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "WARNING",  # INFO shows SQL queries
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            },
        }
    }

    logging.config.dictConfig(logging_config)
