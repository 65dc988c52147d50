from __future__ import annotations

import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def _log_destination() -> str:
    return os.getenv("LOG_DESTINATION", "stdout").lower()


def _log_file_path() -> Optional[str]:
    return os.getenv("LOG_FILE")


def _scheduler_log_level() -> str:
    return os.getenv("APSCHEDULER_LOG_LEVEL", "WARNING").upper()


def _handler() -> Dict[str, Any]:
    destination = _log_destination()
    if destination == "file":
        log_file = _log_file_path()
        if not log_file:
            raise RuntimeError("LOG_FILE is required when LOG_DESTINATION=file")
        return {
            "class": "logging.FileHandler",
            "level": _log_level(),
            "filename": log_file,
            "formatter": "standard",
        }
    return {
        "class": "logging.StreamHandler",
        "level": _log_level(),
        "stream": sys.stdout if destination == "stdout" else sys.stderr,
        "formatter": "standard",
    }


def configure_logging() -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"standard": {"format": LOG_FORMAT}},
            "handlers": {"default": _handler()},
            "loggers": {
                "catcare": {"level": _log_level()},
                # job submission chatter on every regeneration tick
                "apscheduler": {"level": _scheduler_log_level()},
            },
            "root": {"handlers": ["default"], "level": _log_level()},
        }
    )
