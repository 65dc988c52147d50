from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Dict, Iterable, List, Optional

from apps.api.observability import span
from packages.core import config
from packages.core.notifications.channels import NotificationChannel, build_channels
from packages.core.notifications.config import NotificationSettings
from packages.core.notifications.dispatcher import NotificationDispatcher
from packages.core.notifications.models import DispatchReport
from packages.core.notifications.scheduler import NotificationScheduler, ScheduledNotification
from packages.core.reminders.models import ReminderInstance
from packages.core.reminders.service import generate_recurring_instances
from packages.core.storage.sqlite import SQLiteCareStore


logger = logging.getLogger("catcare.reminders")


class ReminderNotifier:
    """Owns the notification scheduler, the loaded settings and the dispatcher."""

    def __init__(
        self,
        store: SQLiteCareStore,
        settings: NotificationSettings,
        scheduler: Optional[NotificationScheduler] = None,
        channels: Optional[Iterable[NotificationChannel]] = None,
        tz: Optional[dt.tzinfo] = None,
        horizon_months: Optional[int] = None,
    ) -> None:
        self._store = store
        self._settings = settings
        self._scheduler = scheduler or NotificationScheduler()
        self._tz = tz or config.reminder_timezone()
        self._horizon_months = horizon_months or config.horizon_months()
        self._dispatcher = self._build_dispatcher(channels)
        self._handles: Dict[str, ScheduledNotification] = {}
        self._lock = threading.Lock()

    def _build_dispatcher(
        self, channels: Optional[Iterable[NotificationChannel]] = None
    ) -> NotificationDispatcher:
        if channels is None:
            channels = build_channels(self._settings)
        return NotificationDispatcher(channels, cat_name_for=self._cat_name)

    def _cat_name(self, cat_id: str) -> Optional[str]:
        cat = self._store.get_cat(cat_id)
        return cat.name if cat else None

    @property
    def settings(self) -> NotificationSettings:
        return self._settings

    @property
    def scheduler(self) -> NotificationScheduler:
        return self._scheduler

    def pending(self) -> List[str]:
        with self._lock:
            return [
                reminder_id
                for reminder_id, handle in self._handles.items()
                if not handle.fired and not handle.cancelled
            ]

    def update_settings(self, settings: NotificationSettings) -> None:
        lead_changed = settings.lead_minutes != self._settings.lead_minutes
        self._settings = settings
        self._dispatcher = self._build_dispatcher()
        if lead_changed:
            self._reschedule_pending()

    def _reschedule_pending(self) -> None:
        for reminder_id in self.pending():
            instance = self._store.get_reminder(reminder_id)
            if instance is None:
                self.disarm(reminder_id)
            else:
                self.arm(instance)

    def deliver(self, instance: ReminderInstance) -> DispatchReport:
        with span("reminder.deliver", reminder_id=instance.id):
            return self._dispatcher.deliver(instance)

    def arm(self, instance: ReminderInstance) -> Optional[ScheduledNotification]:
        """Schedule delivery for ``instance``, replacing any earlier handle.

        Muted, paused, completed and already-due reminders are not armed.
        """
        self.disarm(instance.id)
        if not instance.notification_enabled or not instance.is_active or instance.is_completed:
            return None
        if instance.scheduled_time <= self._scheduler.now():
            return None
        handle = self._scheduler.schedule(instance, self._settings.lead_minutes, self.deliver)
        with self._lock:
            self._handles[instance.id] = handle
        return handle

    def disarm(self, reminder_id: str) -> bool:
        with self._lock:
            handle = self._handles.pop(reminder_id, None)
        if handle is None:
            return False
        return handle.cancel()

    def regenerate(self, now: Optional[dt.datetime] = None) -> List[ReminderInstance]:
        with span("reminder.regenerate"):
            created = generate_recurring_instances(
                self._store,
                now=now,
                horizon_months=self._horizon_months,
                tz=self._tz,
            )
        for instance in created:
            self.arm(instance)
        return created

    def rearm_all(self) -> int:
        handles = self._scheduler.rearm(
            self._store.list_reminders(active_only=True),
            self._settings.lead_minutes,
            self.deliver,
        )
        with self._lock:
            previous = [self._handles[key] for key in handles if key in self._handles]
            self._handles.update(handles)
        for handle in previous:
            handle.cancel()
        return len(handles)

    def _regenerate_job(self) -> None:
        try:
            self.regenerate()
        except Exception as exc:
            logger.exception("recurring_generation_failed error=%s", exc)

    def start(self, regenerate_hours: Optional[int] = None) -> None:
        with span("reminder.startup"):
            generate_recurring_instances(
                self._store, horizon_months=self._horizon_months, tz=self._tz
            )
            self.rearm_all()
        self._scheduler.scheduler.add_job(
            self._regenerate_job,
            "interval",
            hours=regenerate_hours or config.regenerate_hours(),
            id="reminders-regenerate",
            replace_existing=True,
        )
        self._scheduler.start()

    def shutdown(self) -> None:
        self._scheduler.shutdown()


def start_scheduler(store: SQLiteCareStore, settings: NotificationSettings) -> ReminderNotifier:
    notifier = ReminderNotifier(store, settings)
    notifier.start()
    return notifier
