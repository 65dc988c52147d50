from __future__ import annotations

import os
from zoneinfo import ZoneInfo


DEFAULT_DATA_DIR = os.path.join("apps", "api", "data")


def data_dir() -> str:
    return os.path.abspath(os.getenv("CATCARE_DATA_DIR", DEFAULT_DATA_DIR))


def db_path() -> str:
    return os.getenv("CATCARE_DB_PATH", os.path.join(data_dir(), "catcare.db"))


def notification_settings_path() -> str:
    return os.getenv(
        "NOTIFICATION_SETTINGS_PATH", os.path.join(data_dir(), "notifications.json")
    )


def reminder_timezone() -> ZoneInfo:
    return ZoneInfo(os.getenv("CATCARE_TIMEZONE", "UTC"))


def horizon_months() -> int:
    return int(os.getenv("REMINDERS_HORIZON_MONTHS", "3"))


def regenerate_hours() -> int:
    return int(os.getenv("REMINDERS_REGENERATE_HOURS", "24"))


def scheduler_enabled() -> bool:
    return os.getenv("REMINDERS_SCHEDULER_ENABLED", "true").lower() == "true"


def api_host() -> str:
    return os.getenv("CATCARE_API_HOST", "127.0.0.1")


def api_port() -> int:
    return int(os.getenv("CATCARE_API_PORT", "8000"))
