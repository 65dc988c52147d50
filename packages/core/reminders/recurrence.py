from __future__ import annotations

import datetime as dt
import logging
import uuid
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Set

from dateutil.relativedelta import relativedelta

from .models import (
    Frequency,
    ReminderInputError,
    ReminderInstance,
    SeriesKey,
    series_key,
)


logger = logging.getLogger("catcare.reminders")

_PERIODS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
}


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _require_aware(value: object, label: str) -> None:
    if not isinstance(value, dt.datetime) or value.utcoffset() is None:
        raise ReminderInputError(f"{label} must be a timezone-aware datetime, got {value!r}")


def advance(moment: dt.datetime, frequency: Frequency) -> dt.datetime:
    """Move ``moment`` forward by one period of ``frequency``.

    Months use calendar arithmetic, so Jan 31 becomes Feb 28 (or 29). The
    wall-clock time of day is kept in whatever zone ``moment`` carries.
    """
    period = _PERIODS.get(Frequency(frequency))
    if period is None:
        raise ValueError(f"frequency {frequency!r} does not recur")
    return moment + period


def default_horizon(now: dt.datetime, months: int = 3) -> dt.datetime:
    return now + relativedelta(months=months)


def day_key(moment: dt.datetime, tz: dt.tzinfo) -> dt.date:
    return moment.astimezone(tz).date()


def latest_instance(instances: Iterable[ReminderInstance]) -> Optional[ReminderInstance]:
    return max(instances, key=lambda instance: instance.scheduled_time, default=None)


def group_by_series(
    instances: Iterable[ReminderInstance],
) -> Dict[SeriesKey, List[ReminderInstance]]:
    groups: Dict[SeriesKey, List[ReminderInstance]] = {}
    for instance in instances:
        groups.setdefault(series_key(instance), []).append(instance)
    return groups


def _expand_series(
    series: List[ReminderInstance],
    horizon: dt.datetime,
    tz: dt.tzinfo,
    stamp: str,
    new_id: Callable[[], str],
) -> List[ReminderInstance]:
    anchor = latest_instance(series)
    if anchor is None:
        return []
    frequency = Frequency(anchor.frequency)
    if frequency is Frequency.ONCE or not anchor.is_active:
        return []

    taken: Set[dt.date] = {day_key(instance.scheduled_time, tz) for instance in series}
    created: List[ReminderInstance] = []
    candidate = advance(anchor.scheduled_time.astimezone(tz), frequency)
    while candidate < horizon:
        day = day_key(candidate, tz)
        if day not in taken:
            created.append(
                replace(
                    anchor,
                    id=new_id(),
                    scheduled_time=candidate,
                    is_completed=False,
                    created_at=stamp,
                    updated_at=stamp,
                )
            )
            taken.add(day)
        candidate = advance(candidate, frequency)
    return created


def new_instances(
    instances: Iterable[ReminderInstance],
    horizon: dt.datetime,
    *,
    tz: dt.tzinfo = dt.timezone.utc,
    now: Optional[dt.datetime] = None,
    new_id: Optional[Callable[[], str]] = None,
) -> List[ReminderInstance]:
    """Return only the instances that have to be added to reach ``horizon``."""
    _require_aware(horizon, "horizon")
    existing = list(instances)
    for instance in existing:
        _require_aware(instance.scheduled_time, f"scheduled_time of reminder {instance.id}")

    stamp = (now or _utc_now()).isoformat()
    make_id = new_id or _new_id
    generated: List[ReminderInstance] = []
    groups = group_by_series(existing)
    for key, series in groups.items():
        created = _expand_series(series, horizon, tz, stamp, make_id)
        if created:
            logger.debug(
                "series_expanded title=%s cat_id=%s frequency=%s generated=%d",
                key[0],
                key[1],
                key[3].value,
                len(created),
            )
        generated.extend(created)
    logger.info(
        "recurring_expanded series=%d generated=%d horizon=%s",
        len(groups),
        len(generated),
        horizon.isoformat(),
    )
    return generated


def expand(
    instances: Iterable[ReminderInstance],
    horizon: dt.datetime,
    *,
    tz: dt.tzinfo = dt.timezone.utc,
    now: Optional[dt.datetime] = None,
    new_id: Optional[Callable[[], str]] = None,
) -> List[ReminderInstance]:
    """Materialise recurring reminders up to (but excluding) ``horizon``.

    The result is the input followed by the generated instances; nothing in
    the input is changed or dropped. The latest instance of each series is
    the anchor and template: its ``is_active``, ``description`` and
    ``notification_enabled`` apply to every generated instance, so pausing
    only the latest instance pauses the whole series while older paused
    instances do not. A calendar day (in ``tz``) that already holds an
    instance of the series is skipped, so feeding the output back in yields
    no further instances.
    """
    existing = list(instances)
    return existing + new_instances(existing, horizon, tz=tz, now=now, new_id=new_id)
