from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from ..reminders.models import ReminderInstance


PRODID = "-//CatCare//Scheduling//EN"


def format_ics_instant(value: dt.datetime) -> str:
    if value.utcoffset() is None:
        raise ValueError("calendar instants must be timezone-aware")
    return value.astimezone(dt.timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def escape_ics_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def build_ics(
    title: str,
    start: dt.datetime,
    end: dt.datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    uid: Optional[str] = None,
    stamp: Optional[dt.datetime] = None,
) -> str:
    if end < start:
        raise ValueError("event end must not be before its start")
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "BEGIN:VEVENT",
        f"UID:{uid or uuid.uuid4()}@catcare",
        f"DTSTAMP:{format_ics_instant(stamp or dt.datetime.now(dt.timezone.utc))}",
        f"DTSTART:{format_ics_instant(start)}",
        f"DTEND:{format_ics_instant(end)}",
        f"SUMMARY:{escape_ics_text(title)}",
    ]
    if description:
        lines.append(f"DESCRIPTION:{escape_ics_text(description)}")
    if location:
        lines.append(f"LOCATION:{escape_ics_text(location)}")
    lines.extend(["END:VEVENT", "END:VCALENDAR"])
    return "\r\n".join(lines) + "\r\n"


def reminder_ics(
    reminder: ReminderInstance,
    duration_minutes: int = 30,
    location: Optional[str] = None,
) -> str:
    return build_ics(
        title=reminder.title,
        start=reminder.scheduled_time,
        end=reminder.scheduled_time + dt.timedelta(minutes=duration_minutes),
        description=reminder.description,
        location=location,
        uid=reminder.id,
    )
