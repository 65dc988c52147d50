from __future__ import annotations

import datetime as dt
import logging
import threading
import uuid
from dataclasses import replace
from typing import TYPE_CHECKING, List, Optional

from .models import Frequency, ReminderInstance, ReminderType
from .recurrence import default_horizon, new_instances

if TYPE_CHECKING:
    from ..storage.base import ReminderStore


logger = logging.getLogger("catcare.reminders")

_generation_lock = threading.Lock()


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _to_iso(value: dt.datetime) -> str:
    return value.isoformat()


def _localize(value: dt.datetime, tz: dt.tzinfo) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def create_reminder(
    store: ReminderStore,
    cat_id: str,
    title: str,
    description: Optional[str],
    type: ReminderType,
    frequency: Frequency,
    scheduled_time: dt.datetime,
    notification_enabled: bool = True,
    is_active: bool = True,
    tz: dt.tzinfo = dt.timezone.utc,
) -> ReminderInstance:
    now = _utc_now()
    reminder = ReminderInstance(
        id=str(uuid.uuid4()),
        cat_id=cat_id.strip(),
        title=title.strip(),
        description=description.strip() if description else None,
        type=ReminderType(type),
        frequency=Frequency(frequency),
        scheduled_time=_localize(scheduled_time, tz),
        is_active=is_active,
        is_completed=False,
        notification_enabled=notification_enabled,
        created_at=_to_iso(now),
        updated_at=_to_iso(now),
    )
    store.create_reminder(reminder)
    return reminder


def update_reminder(
    store: ReminderStore,
    reminder: ReminderInstance,
    cat_id: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    type: Optional[ReminderType] = None,
    frequency: Optional[Frequency] = None,
    scheduled_time: Optional[dt.datetime] = None,
    is_active: Optional[bool] = None,
    is_completed: Optional[bool] = None,
    notification_enabled: Optional[bool] = None,
    tz: dt.tzinfo = dt.timezone.utc,
) -> ReminderInstance:
    updated = ReminderInstance(
        id=reminder.id,
        cat_id=cat_id.strip() if cat_id is not None else reminder.cat_id,
        title=title.strip() if title is not None else reminder.title,
        description=description.strip() if description is not None else reminder.description,
        type=ReminderType(type) if type is not None else reminder.type,
        frequency=Frequency(frequency) if frequency is not None else reminder.frequency,
        scheduled_time=(
            _localize(scheduled_time, tz)
            if scheduled_time is not None
            else reminder.scheduled_time
        ),
        is_active=is_active if is_active is not None else reminder.is_active,
        is_completed=is_completed if is_completed is not None else reminder.is_completed,
        notification_enabled=(
            notification_enabled
            if notification_enabled is not None
            else reminder.notification_enabled
        ),
        created_at=reminder.created_at,
        updated_at=_to_iso(_utc_now()),
    )
    store.update_reminder(updated)
    return updated


def toggle_reminder(store: ReminderStore, reminder: ReminderInstance) -> ReminderInstance:
    updated = replace(
        reminder,
        is_completed=not reminder.is_completed,
        updated_at=_to_iso(_utc_now()),
    )
    store.update_reminder(updated)
    return updated


def delete_reminder(store: ReminderStore, reminder_id: str) -> bool:
    return store.delete_reminder(reminder_id)


def list_reminders(store: ReminderStore, active_only: bool = False) -> List[ReminderInstance]:
    return store.list_reminders(active_only=active_only)


def reminders_for_cat(store: ReminderStore, cat_id: str) -> List[ReminderInstance]:
    return store.list_reminders(cat_id=cat_id)


def upcoming_reminders(
    store: ReminderStore, hours: int = 24, now: Optional[dt.datetime] = None
) -> List[ReminderInstance]:
    start = now or _utc_now()
    end = start + dt.timedelta(hours=hours)
    return [
        reminder
        for reminder in store.list_reminders(active_only=True)
        if start <= reminder.scheduled_time <= end and not reminder.is_completed
    ]


def generate_recurring_instances(
    store: ReminderStore,
    now: Optional[dt.datetime] = None,
    horizon_months: int = 3,
    tz: dt.tzinfo = dt.timezone.utc,
) -> List[ReminderInstance]:
    """Expand every recurring series in the store and persist the new instances.

    Runs are serialized: the read and the append happen under one lock, so
    overlapping callers never add the same day twice.
    """
    current = now or _utc_now()
    horizon = default_horizon(current, months=horizon_months)
    with _generation_lock:
        created = new_instances(store.list_reminders(), horizon, tz=tz, now=current)
        store.append_reminders(created)
    logger.info("recurring_generated count=%d horizon=%s", len(created), horizon.isoformat())
    return created
