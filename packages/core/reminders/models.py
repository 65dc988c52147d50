from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ReminderType(str, Enum):
    FEEDING = "feeding"
    MEDICATION = "medication"
    VET = "vet"
    GROOMING = "grooming"
    OTHER = "other"


class Frequency(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReminderInputError(ValueError):
    """Reminder data that cannot be expanded safely."""


SeriesKey = Tuple[str, str, ReminderType, Frequency]


@dataclass(frozen=True)
class ReminderInstance:
    id: str
    cat_id: str
    title: str
    description: Optional[str]
    type: ReminderType
    frequency: Frequency
    scheduled_time: dt.datetime
    is_active: bool
    is_completed: bool
    notification_enabled: bool
    created_at: str
    updated_at: str


def series_key(instance: ReminderInstance) -> SeriesKey:
    """Identity shared by every instance of one recurring task."""
    return (
        instance.title,
        instance.cat_id,
        ReminderType(instance.type),
        Frequency(instance.frequency),
    )
