import datetime as dt

from packages.core.cats.service import create_cat, update_cat
from packages.core.reminders.models import Frequency, ReminderInstance, ReminderType
from packages.core.storage.sqlite import SQLiteCareStore


def _reminder(reminder_id, scheduled_time, cat_id="c1", is_active=True):
    return ReminderInstance(
        id=reminder_id,
        cat_id=cat_id,
        title="Feed",
        description=None,
        type=ReminderType.FEEDING,
        frequency=Frequency.DAILY,
        scheduled_time=scheduled_time,
        is_active=is_active,
        is_completed=False,
        notification_enabled=True,
        created_at="2024-01-01T00:00:00+00:00",
        updated_at="2024-01-01T00:00:00+00:00",
    )


def test_reminders_are_listed_by_instant(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    plus_two = dt.timezone(dt.timedelta(hours=2))
    store.append_reminders(
        [
            _reminder("late", dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)),
            _reminder("early", dt.datetime(2024, 1, 1, 9, 0, tzinfo=plus_two)),
            _reminder("other-cat", dt.datetime(2024, 1, 2, 9, 0, tzinfo=dt.timezone.utc), cat_id="c2"),
            _reminder("paused", dt.datetime(2024, 1, 3, 9, 0, tzinfo=dt.timezone.utc), is_active=False),
        ]
    )

    assert [item.id for item in store.list_reminders()] == ["early", "late", "other-cat", "paused"]
    assert [item.id for item in store.list_reminders(active_only=True)] == ["early", "late", "other-cat"]
    assert [item.id for item in store.list_reminders(cat_id="c2")] == ["other-cat"]

    early = store.get_reminder("early")
    assert early.scheduled_time.utcoffset() == dt.timedelta(hours=2)
    assert early.type is ReminderType.FEEDING
    assert early.frequency is Frequency.DAILY


def test_append_nothing_is_a_no_op(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    store.append_reminders([])
    assert store.list_reminders() == []
    assert store.get_reminder("missing") is None


def test_cat_crud(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))

    miso = create_cat(store, " Miso ", breed="Tabby", age=3, medical_history=["spayed", " "])
    create_cat(store, "alfie")

    assert [cat.name for cat in store.list_cats()] == ["alfie", "Miso"]
    assert store.get_cat(miso.id).medical_history == ["spayed"]

    updated = update_cat(store, miso, weight=4.2, vet_name=" Dr. Paws ")
    assert updated.weight == 4.2
    assert updated.vet_name == "Dr. Paws"
    assert updated.breed == "Tabby"
    assert store.get_cat(miso.id) == updated

    assert store.delete_cat(miso.id) is True
    assert store.delete_cat(miso.id) is False
    assert store.get_cat(miso.id) is None


def test_append_skips_instances_already_stored_for_the_series(tmp_path):
    store = SQLiteCareStore(db_path=str(tmp_path / "catcare.db"))
    moment = dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)
    store.append_reminders([_reminder("first", moment)])

    store.append_reminders(
        [
            _reminder("duplicate", moment),
            _reminder("next-day", moment + dt.timedelta(days=1)),
        ]
    )

    assert [item.id for item in store.list_reminders()] == ["first", "next-day"]
