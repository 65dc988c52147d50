from .cats import CatCreateRequest, CatResponse, CatUpdateRequest
from .notifications import (
    ChannelOutcomeResponse,
    NotificationSettingsModel,
    TestNotificationResponse,
)
from .reminders import (
    GenerateResponse,
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
)

__all__ = [
    "CatCreateRequest",
    "CatResponse",
    "CatUpdateRequest",
    "ChannelOutcomeResponse",
    "GenerateResponse",
    "NotificationSettingsModel",
    "ReminderCreateRequest",
    "ReminderResponse",
    "ReminderUpdateRequest",
    "TestNotificationResponse",
]
