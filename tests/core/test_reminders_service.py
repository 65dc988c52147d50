import datetime as dt
import threading
import time
from zoneinfo import ZoneInfo

from packages.core.reminders.models import Frequency, ReminderType
from packages.core.reminders.service import (
    create_reminder,
    delete_reminder,
    generate_recurring_instances,
    reminders_for_cat,
    toggle_reminder,
    upcoming_reminders,
    update_reminder,
)
from packages.core.storage.sqlite import SQLiteCareStore


UTC = dt.timezone.utc


def _create(store, scheduled_time, frequency=Frequency.DAILY, **overrides):
    values = dict(
        cat_id="c1",
        title="Breakfast",
        description="Dry food",
        type=ReminderType.FEEDING,
        frequency=frequency,
        scheduled_time=scheduled_time,
    )
    values.update(overrides)
    return create_reminder(store, **values)


def test_reminder_create_and_update(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))

    reminder = _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC), title=" Breakfast ")
    assert reminder.id
    assert reminder.title == "Breakfast"
    assert reminder.is_active is True
    assert reminder.is_completed is False

    updated = update_reminder(store, reminder, title="Brunch", frequency=Frequency.WEEKLY)
    assert updated.title == "Brunch"
    assert updated.frequency is Frequency.WEEKLY
    assert updated.created_at == reminder.created_at
    assert store.get_reminder(reminder.id) == updated


def test_naive_times_use_the_configured_zone(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    berlin = ZoneInfo("Europe/Berlin")

    reminder = _create(store, dt.datetime(2024, 1, 1, 8, 0), tz=berlin)

    assert reminder.scheduled_time.utcoffset() == dt.timedelta(hours=1)
    assert store.get_reminder(reminder.id).scheduled_time == reminder.scheduled_time


def test_toggle_flips_completion(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    reminder = _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC))

    done = toggle_reminder(store, reminder)
    assert done.is_completed is True
    assert toggle_reminder(store, done).is_completed is False


def test_upcoming_filters_window_and_state(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    now = dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    soon = _create(store, now + dt.timedelta(hours=2), title="Soon")
    _create(store, now + dt.timedelta(hours=30), title="Later")
    _create(store, now - dt.timedelta(hours=1), title="Past")
    _create(store, now + dt.timedelta(hours=3), title="Paused", is_active=False)
    done = _create(store, now + dt.timedelta(hours=4), title="Done")
    toggle_reminder(store, done)

    upcoming = upcoming_reminders(store, hours=24, now=now)

    assert [reminder.id for reminder in upcoming] == [soon.id]


def test_generation_survives_restart_without_duplicates(tmp_path):
    db_path = str(tmp_path / "catcare.db")
    now = dt.datetime(2024, 1, 1, 6, 0, tzinfo=UTC)
    store = SQLiteCareStore(db_path=db_path)
    _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC), frequency=Frequency.WEEKLY)
    _create(store, dt.datetime(2024, 1, 2, 9, 0, tzinfo=UTC), frequency=Frequency.ONCE, title="Vet")

    created = generate_recurring_instances(store, now=now, horizon_months=1)
    assert len(created) == 4
    assert [item.scheduled_time.day for item in created] == [8, 15, 22, 29]

    restarted = SQLiteCareStore(db_path=db_path)
    assert generate_recurring_instances(restarted, now=now, horizon_months=1) == []
    assert len(restarted.list_reminders()) == 6


def test_delete_and_list_by_cat(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    first = _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC))
    _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC), cat_id="c2")

    assert [item.id for item in reminders_for_cat(store, "c1")] == [first.id]
    assert delete_reminder(store, first.id) is True
    assert delete_reminder(store, first.id) is False
    assert reminders_for_cat(store, "c1") == []


class SlowListingStore(SQLiteCareStore):
    def list_reminders(self, active_only=False, cat_id=None):
        reminders = super().list_reminders(active_only=active_only, cat_id=cat_id)
        time.sleep(0.05)
        return reminders


def test_overlapping_generation_adds_each_day_once(tmp_path):
    store = SlowListingStore(db_path=str(tmp_path / "catcare.db"))
    now = dt.datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    _create(store, dt.datetime(2024, 1, 1, 8, 0, tzinfo=UTC))
    results = []

    def run():
        results.append(generate_recurring_instances(store, now=now, horizon_months=1))

    threads = [threading.Thread(target=run) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    rows = store.list_reminders()
    days = {item.scheduled_time.date() for item in rows}
    assert len(rows) == len(days) == 32
    assert sorted(len(created) for created in results) == [0, 31]
