# tarball_service/logging_conf.py
from __future__ import annotations
import logging
import logging.config
from typing import Any, Dict, Optional

from tarball_service.config import settings

FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def build_logging_config(level: Optional[str] = None) -> Dict[str, Any]:
    level = (level or settings.log_level).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "basic": {"format": FORMAT},
            "uvicorn": {"format": FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "basic",
                "level": level,
            },
            "uvicorn": {
                "class": "logging.StreamHandler",
                "formatter": "uvicorn",
                "level": level,
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            "uvicorn": {"handlers": ["uvicorn"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["uvicorn"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["uvicorn"], "level": level, "propagate": False},
            "httpx": {"level": "WARNING"},
            "tarball_service": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def setup_logging(level: Optional[str] = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
