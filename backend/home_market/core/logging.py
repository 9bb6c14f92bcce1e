"""
Logging configuration
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict

from ..config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure root, application, uvicorn and sqlalchemy loggers from settings."""
    handlers: Dict[str, Dict[str, Any]] = {}
    formatter = "json" if settings.log_format.lower() == "json" else "default"

    if settings.log_to_console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": formatter,
            "stream": sys.stdout,
        }

    if settings.log_to_file:
        Path(settings.log_file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json" if formatter == "json" else "detailed",
            "filename": settings.log_file_path,
            "maxBytes": settings.log_max_size_mb * 1024 * 1024,
            "backupCount": settings.log_backup_count,
        }

    handler_names = list(handlers)
    level = settings.log_level.upper()

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "format": '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}',
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": handler_names,
                "level": level,
            },
            "home_market": {
                "handlers": handler_names,
                "level": "DEBUG" if settings.debug else level,
                "propagate": False,
            },
            "uvicorn": {
                "handlers": handler_names,
                "level": "INFO",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": handler_names,
                "level": "INFO" if settings.log_verbosity == "full" else "WARNING",
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured (level={level}, format={settings.log_format}, verbosity={settings.log_verbosity})")


def get_logger(name: str) -> logging.Logger:
    """Get logger with given name."""
    return logging.getLogger(name)
