from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, fields
from typing import List, Optional

from .. import config as app_config


logger = logging.getLogger("catcare.notifications")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_LEAD_MINUTES = 15


class NotificationConfigError(ValueError):
    """Notification settings that cannot be used to deliver anything."""


@dataclass(frozen=True)
class NotificationSettings:
    push_enabled: bool = False
    email_enabled: bool = False
    email_address: Optional[str] = None
    sms_enabled: bool = False
    sms_phone: Optional[str] = None
    sms_gateway_domain: Optional[str] = None
    lead_minutes: int = DEFAULT_LEAD_MINUTES


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and EMAIL_PATTERN.match(address) is not None


def validate_notification_settings(settings: NotificationSettings) -> List[str]:
    """Return a list of problems; an empty list means the settings are usable."""
    issues = []
    if not (settings.push_enabled or settings.email_enabled or settings.sms_enabled):
        issues.append("no notification channel is enabled")
    if settings.email_enabled:
        if not settings.email_address:
            issues.append("email notifications are enabled but no email address is set")
        elif not is_valid_email(settings.email_address):
            issues.append(f"invalid email address: {settings.email_address}")
    if settings.sms_enabled and not (settings.sms_phone and settings.sms_gateway_domain):
        issues.append("sms notifications need a phone number and a gateway domain")
    if settings.lead_minutes < 0:
        issues.append("lead_minutes must not be negative")
    return issues


def load_notification_settings(path: Optional[str] = None) -> NotificationSettings:
    settings_path = path or app_config.notification_settings_path()
    if not os.path.exists(settings_path):
        return NotificationSettings()
    with open(settings_path, "r", encoding="utf-8") as handle:
        raw = json.load(handle)
    known = {item.name for item in fields(NotificationSettings)}
    ignored = sorted(set(raw) - known)
    if ignored:
        logger.warning("notification_settings_ignored_keys keys=%s", ",".join(ignored))
    return NotificationSettings(**{key: value for key, value in raw.items() if key in known})


def save_notification_settings(settings: NotificationSettings, path: Optional[str] = None) -> None:
    settings_path = path or app_config.notification_settings_path()
    directory = os.path.dirname(settings_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(settings_path, "w", encoding="utf-8") as handle:
        json.dump(asdict(settings), handle, indent=2)
