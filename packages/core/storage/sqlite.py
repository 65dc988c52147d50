from __future__ import annotations

import datetime as dt
import json
import os
import sqlite3
from typing import List, Optional, Sequence, Tuple

from ..cats.models import Cat
from ..reminders.models import Frequency, ReminderInstance, ReminderType
from .base import CatStore, ReminderStore


_REMINDER_COLUMNS = """
    id, cat_id, title, description, type, frequency, scheduled_time,
    is_active, is_completed, notification_enabled, created_at, updated_at
"""

_CAT_COLUMNS = """
    id, name, breed, age, weight, color, microchip, vet_name, vet_phone,
    vet_address, medical_history, created_at, updated_at
"""


def _utc_iso(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).isoformat()


class SQLiteCareStore(ReminderStore, CatStore):
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS reminders (
                    id TEXT PRIMARY KEY,
                    cat_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    type TEXT NOT NULL,
                    frequency TEXT NOT NULL,
                    scheduled_time TEXT NOT NULL,
                    scheduled_utc TEXT NOT NULL,
                    is_active INTEGER NOT NULL,
                    is_completed INTEGER NOT NULL,
                    notification_enabled INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS reminders_cat_id_idx
                ON reminders (cat_id)
                """
            )
            conn.execute(
                """
                CREATE UNIQUE INDEX IF NOT EXISTS reminders_series_instant_idx
                ON reminders (title, cat_id, type, frequency, scheduled_utc)
                WHERE frequency != 'once'
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS cats (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    breed TEXT,
                    age INTEGER,
                    weight REAL,
                    color TEXT,
                    microchip TEXT,
                    vet_name TEXT,
                    vet_phone TEXT,
                    vet_address TEXT,
                    medical_history TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def _reminder_params(self, reminder: ReminderInstance) -> Tuple:
        return (
            reminder.id,
            reminder.cat_id,
            reminder.title,
            reminder.description,
            ReminderType(reminder.type).value,
            Frequency(reminder.frequency).value,
            reminder.scheduled_time.isoformat(),
            _utc_iso(reminder.scheduled_time),
            1 if reminder.is_active else 0,
            1 if reminder.is_completed else 0,
            1 if reminder.notification_enabled else 0,
            reminder.created_at,
            reminder.updated_at,
        )

    def _row_to_reminder(self, row: Tuple) -> ReminderInstance:
        return ReminderInstance(
            id=row[0],
            cat_id=row[1],
            title=row[2],
            description=row[3],
            type=ReminderType(row[4]),
            frequency=Frequency(row[5]),
            scheduled_time=dt.datetime.fromisoformat(row[6]),
            is_active=bool(row[7]),
            is_completed=bool(row[8]),
            notification_enabled=bool(row[9]),
            created_at=row[10],
            updated_at=row[11],
        )

    def _insert_reminders(
        self, reminders: Sequence[ReminderInstance], verb: str = "INSERT"
    ) -> None:
        with self._connect() as conn:
            conn.executemany(
                f"""
                {verb} INTO reminders (
                    id, cat_id, title, description, type, frequency, scheduled_time,
                    scheduled_utc, is_active, is_completed, notification_enabled,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [self._reminder_params(reminder) for reminder in reminders],
            )

    def create_reminder(self, reminder: ReminderInstance) -> None:
        self._insert_reminders([reminder])

    def append_reminders(self, reminders: Sequence[ReminderInstance]) -> None:
        """Insert generated instances, skipping any already stored for that series and instant."""
        if not reminders:
            return
        self._insert_reminders(reminders, verb="INSERT OR IGNORE")

    def update_reminder(self, reminder: ReminderInstance) -> None:
        params = self._reminder_params(reminder)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE reminders
                SET cat_id = ?, title = ?, description = ?, type = ?, frequency = ?,
                    scheduled_time = ?, scheduled_utc = ?, is_active = ?,
                    is_completed = ?, notification_enabled = ?, created_at = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                params[1:] + params[:1],
            )

    def get_reminder(self, reminder_id: str) -> Optional[ReminderInstance]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_REMINDER_COLUMNS} FROM reminders WHERE id = ?",
                (reminder_id,),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_reminder(row)

    def list_reminders(
        self, active_only: bool = False, cat_id: Optional[str] = None
    ) -> List[ReminderInstance]:
        clauses = []
        params: List[object] = []
        if active_only:
            clauses.append("is_active = 1")
        if cat_id is not None:
            clauses.append("cat_id = ?")
            params.append(cat_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {_REMINDER_COLUMNS}
                FROM reminders
                {where}
                ORDER BY scheduled_utc ASC, created_at ASC
                """,
                params,
            ).fetchall()
            return [self._row_to_reminder(row) for row in rows]

    def delete_reminder(self, reminder_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM reminders WHERE id = ?", (reminder_id,))
            return cursor.rowcount > 0

    def _cat_params(self, cat: Cat) -> Tuple:
        return (
            cat.id,
            cat.name,
            cat.breed,
            cat.age,
            cat.weight,
            cat.color,
            cat.microchip,
            cat.vet_name,
            cat.vet_phone,
            cat.vet_address,
            json.dumps(list(cat.medical_history)),
            cat.created_at,
            cat.updated_at,
        )

    def _row_to_cat(self, row: Tuple) -> Cat:
        return Cat(
            id=row[0],
            name=row[1],
            breed=row[2],
            age=row[3],
            weight=row[4],
            color=row[5],
            microchip=row[6],
            vet_name=row[7],
            vet_phone=row[8],
            vet_address=row[9],
            medical_history=json.loads(row[10] or "[]"),
            created_at=row[11],
            updated_at=row[12],
        )

    def create_cat(self, cat: Cat) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO cats ({_CAT_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._cat_params(cat),
            )

    def update_cat(self, cat: Cat) -> None:
        params = self._cat_params(cat)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE cats
                SET name = ?, breed = ?, age = ?, weight = ?, color = ?, microchip = ?,
                    vet_name = ?, vet_phone = ?, vet_address = ?, medical_history = ?,
                    created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                params[1:] + params[:1],
            )

    def get_cat(self, cat_id: str) -> Optional[Cat]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_CAT_COLUMNS} FROM cats WHERE id = ?",
                (cat_id,),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_cat(row)

    def list_cats(self) -> List[Cat]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_CAT_COLUMNS} FROM cats ORDER BY name COLLATE NOCASE ASC"
            ).fetchall()
            return [self._row_to_cat(row) for row in rows]

    def delete_cat(self, cat_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM cats WHERE id = ?", (cat_id,))
            return cursor.rowcount > 0
