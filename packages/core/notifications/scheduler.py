from __future__ import annotations

import datetime as dt
import logging
import threading
import uuid
from typing import Any, Callable, Dict, Iterable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from ..reminders.models import ReminderInstance


logger = logging.getLogger("catcare.notifications")

Deliver = Callable[[ReminderInstance], Any]


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ScheduledNotification:
    """Cancellation handle for one scheduled delivery.

    Calling the handle (or ``cancel()``) before the job runs prevents
    delivery. Once delivery has started, cancelling does nothing.
    """

    def __init__(
        self,
        reminder_id: str,
        fire_at: dt.datetime,
        scheduler: Optional[BaseScheduler] = None,
        job_id: Optional[str] = None,
    ) -> None:
        self.reminder_id = reminder_id
        self.fire_at = fire_at
        self.job_id = job_id
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self, deliver: Deliver, instance: ReminderInstance) -> None:
        with self._lock:
            if self._cancelled or self._fired:
                return
            self._fired = True
        logger.info("notification_firing id=%s fire_at=%s", instance.id, self.fire_at.isoformat())
        deliver(instance)

    def cancel(self) -> bool:
        """Return True when a pending delivery was cancelled."""
        with self._lock:
            if self._fired or self._cancelled:
                return False
            self._cancelled = True
        if self._scheduler is not None and self.job_id is not None:
            try:
                self._scheduler.remove_job(self.job_id)
            except JobLookupError:
                pass
        logger.info("notification_cancelled id=%s", self.reminder_id)
        return True

    __call__ = cancel


class NotificationScheduler:
    def __init__(
        self,
        scheduler: Optional[BaseScheduler] = None,
        clock: Callable[[], dt.datetime] = utc_now,
    ) -> None:
        self._scheduler = scheduler or BackgroundScheduler(timezone="UTC")
        self._clock = clock

    @property
    def scheduler(self) -> BaseScheduler:
        return self._scheduler

    def now(self) -> dt.datetime:
        return self._clock()

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def schedule(
        self, instance: ReminderInstance, lead_minutes: int, deliver: Deliver
    ) -> ScheduledNotification:
        fire_at = instance.scheduled_time - dt.timedelta(minutes=lead_minutes)
        if fire_at <= self._clock():
            handle = ScheduledNotification(instance.id, fire_at)
            handle._run(deliver, instance)
            return handle

        job_id = f"notify-{instance.id}-{uuid.uuid4().hex[:8]}"
        handle = ScheduledNotification(instance.id, fire_at, self._scheduler, job_id)
        self._scheduler.add_job(
            handle._run,
            "date",
            run_date=fire_at,
            args=[deliver, instance],
            id=job_id,
            misfire_grace_time=None,
        )
        logger.info("notification_scheduled id=%s fire_at=%s", instance.id, fire_at.isoformat())
        return handle

    def rearm(
        self, instances: Iterable[ReminderInstance], lead_minutes: int, deliver: Deliver
    ) -> Dict[str, ScheduledNotification]:
        """Schedule every pending instance, typically after a restart.

        Instances whose due time has already passed are skipped; instances
        still ahead whose lead window is open are delivered right away.
        """
        now = self._clock()
        handles: Dict[str, ScheduledNotification] = {}
        for instance in instances:
            if not instance.notification_enabled or not instance.is_active:
                continue
            if instance.is_completed or instance.scheduled_time <= now:
                continue
            handles[instance.id] = self.schedule(instance, lead_minutes, deliver)
        logger.info("notifications_rearmed count=%d", len(handles))
        return handles
