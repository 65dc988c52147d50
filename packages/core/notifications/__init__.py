from .channels import ChannelError, EmailChannel, PushChannel, SmsChannel, build_channels
from .config import (
    NotificationConfigError,
    NotificationSettings,
    load_notification_settings,
    save_notification_settings,
    validate_notification_settings,
)
from .dispatcher import NotificationDispatcher, send_test_notification
from .models import ChannelOutcome, DispatchReport, NotificationPayload, payload_for
from .scheduler import NotificationScheduler, ScheduledNotification

__all__ = [
    "ChannelError",
    "ChannelOutcome",
    "DispatchReport",
    "EmailChannel",
    "NotificationConfigError",
    "NotificationDispatcher",
    "NotificationPayload",
    "NotificationScheduler",
    "NotificationSettings",
    "PushChannel",
    "ScheduledNotification",
    "SmsChannel",
    "build_channels",
    "load_notification_settings",
    "payload_for",
    "save_notification_settings",
    "send_test_notification",
    "validate_notification_settings",
]
