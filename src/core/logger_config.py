import logging.config
import sys
from typing import Any


def build_logging_config(level: str = "INFO", log_file: str = "circle_errors.log") -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        # Formatters: How the logs look
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        # Handlers: Where the logs go
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
                "filename": log_file,
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5,
                "delay": True,
            },
        },
        # Loggers: The configuration for specific modules
        "loggers": {
            "": {  # The "root" logger (captures everything)
                "handlers": ["console", "file"],
                "level": level,
                "propagate": True,
            },
            "sqlalchemy.engine": {  # Set to INFO to see SQL queries
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def configure_logging(level: str = "INFO", log_file: str = "circle_errors.log") -> None:
    logging.config.dictConfig(build_logging_config(level, log_file))
