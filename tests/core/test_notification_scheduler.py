import datetime as dt
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from packages.core.notifications.scheduler import NotificationScheduler
from packages.core.reminders.models import Frequency, ReminderInstance, ReminderType


NOW = dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc)


def _reminder(scheduled_time, reminder_id="r1", **overrides):
    values = dict(
        id=reminder_id,
        cat_id="c1",
        title="Medication",
        description="Half a pill",
        type=ReminderType.MEDICATION,
        frequency=Frequency.ONCE,
        scheduled_time=scheduled_time,
        is_active=True,
        is_completed=False,
        notification_enabled=True,
        created_at=NOW.isoformat(),
        updated_at=NOW.isoformat(),
    )
    values.update(overrides)
    return ReminderInstance(**values)


def _scheduler():
    return NotificationScheduler(scheduler=BackgroundScheduler(timezone="UTC"), clock=lambda: NOW)


def test_past_due_reminder_is_delivered_immediately():
    delivered = []
    scheduler = _scheduler()
    reminder = _reminder(NOW - dt.timedelta(minutes=5))

    handle = scheduler.schedule(reminder, 15, delivered.append)

    assert delivered == [reminder]
    assert handle.fired is True
    assert handle.fire_at == NOW - dt.timedelta(minutes=20)
    assert scheduler.scheduler.get_jobs() == []


def test_fire_time_exactly_now_is_immediate():
    delivered = []
    scheduler = _scheduler()

    scheduler.schedule(_reminder(NOW + dt.timedelta(minutes=15)), 15, delivered.append)

    assert len(delivered) == 1


def test_future_reminder_gets_a_one_shot_job():
    delivered = []
    scheduler = _scheduler()
    reminder = _reminder(NOW + dt.timedelta(hours=2))

    handle = scheduler.schedule(reminder, 15, delivered.append)

    assert delivered == []
    assert handle.fired is False
    assert handle.fire_at == NOW + dt.timedelta(hours=1, minutes=45)
    jobs = scheduler.scheduler.get_jobs()
    assert [job.id for job in jobs] == [handle.job_id]


def test_cancel_before_fire_prevents_delivery():
    delivered = []
    scheduler = _scheduler()
    reminder = _reminder(NOW + dt.timedelta(hours=2))
    handle = scheduler.schedule(reminder, 15, delivered.append)

    assert handle() is True
    assert handle.cancelled is True
    assert scheduler.scheduler.get_jobs() == []

    handle._run(delivered.append, reminder)
    assert delivered == []


def test_cancel_after_fire_is_a_no_op():
    delivered = []
    scheduler = _scheduler()
    reminder = _reminder(NOW + dt.timedelta(hours=2))
    handle = scheduler.schedule(reminder, 15, delivered.append)

    handle._run(delivered.append, reminder)
    assert handle.cancel() is False
    assert handle.cancel() is False
    assert delivered == [reminder]


def test_running_scheduler_fires_deliver():
    fired = threading.Event()
    scheduler = NotificationScheduler()
    reminder = _reminder(
        dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=1, milliseconds=300)
    )
    scheduler.start()
    try:
        scheduler.schedule(reminder, 1, lambda instance: fired.set())
        assert fired.wait(timeout=5)
    finally:
        scheduler.shutdown()


def test_rearm_schedules_only_pending_notifications():
    delivered = []
    scheduler = _scheduler()
    reminders = [
        _reminder(NOW + dt.timedelta(hours=3), "future"),
        _reminder(NOW + dt.timedelta(minutes=10), "due-soon"),
        _reminder(NOW - dt.timedelta(hours=1), "past"),
        _reminder(NOW + dt.timedelta(hours=3), "muted", notification_enabled=False),
        _reminder(NOW + dt.timedelta(hours=3), "done", is_completed=True),
        _reminder(NOW + dt.timedelta(hours=3), "paused", is_active=False),
    ]

    handles = scheduler.rearm(reminders, 15, delivered.append)

    assert set(handles) == {"future", "due-soon"}
    assert [item.id for item in delivered] == ["due-soon"]
    assert len(scheduler.scheduler.get_jobs()) == 1
