"""
Configuration centralisée des logs pour le projet.
"""

import logging.config
import sys
from typing import Any, Dict

from loguru import logger

from carte_loyers.api.config.settings import settings


def build_logging_config(level: str, log_file: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "detailed": {
                "format": (
                    "%(asctime)s - %(name)s - %(levelname)s - "
                    "%(filename)s:%(lineno)d - %(message)s"
                ),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            },
            "file": {
                "class": "logging.FileHandler",
                "formatter": "detailed",
                "level": "DEBUG",
                "filename": log_file,
                "encoding": "utf-8",
            },
        },
        "root": {
            "handlers": ["console", "file"],
            "level": level,
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "carte_loyers": {
                "handlers": ["console", "file"],
                "level": level,
                "propagate": False,
            },
            "httpx": {"level": "WARNING"},
        },
    }


def setup_logging() -> None:
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(
        build_logging_config(level, str(settings.get_log_path()))
    )

    # Supprimer les gestionnaires par défaut de Loguru pour éviter les doublons
    logger.remove()
    logger.add(
        sys.stdout,
        level=level,
        serialize=settings.LOG_FORMAT == "json",
    )
    logger.info(
        f"Logs configurés ({level}) - environnement {settings.ENVIRONMENT}"
    )
