from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import List, Optional

from ..reminders.models import ReminderInstance, ReminderType


@dataclass(frozen=True)
class NotificationPayload:
    title: str
    message: str
    type: ReminderType
    scheduled_time: dt.datetime
    cat_name: Optional[str] = None


@dataclass(frozen=True)
class ChannelOutcome:
    channel: str
    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class DispatchReport:
    outcomes: List[ChannelOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[str]:
        return [outcome.channel for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[str]:
        return [outcome.channel for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def payload_for(instance: ReminderInstance, cat_name: Optional[str] = None) -> NotificationPayload:
    return NotificationPayload(
        title=instance.title,
        message=instance.description or f"Time for {instance.title}",
        type=ReminderType(instance.type),
        scheduled_time=instance.scheduled_time,
        cat_name=cat_name,
    )
