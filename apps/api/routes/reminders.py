from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request, Response

from apps.api.observability import span
from apps.api.schemas.reminders import (
    GenerateResponse,
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
)
from packages.core import config
from packages.core.calendar.ics import reminder_ics
from packages.core.reminders.models import ReminderInputError, ReminderInstance
from packages.core.reminders.recurrence import default_horizon
from packages.core.reminders.service import (
    create_reminder,
    delete_reminder,
    generate_recurring_instances,
    list_reminders,
    reminders_for_cat,
    toggle_reminder,
    upcoming_reminders,
    update_reminder,
)
from packages.core.storage.sqlite import SQLiteCareStore


router = APIRouter(prefix="/reminders", tags=["reminders"])


def _store() -> SQLiteCareStore:
    return SQLiteCareStore(db_path=config.db_path())


def _notifier(request: Request):
    return getattr(request.app.state, "notifier", None)


def _to_response(reminder: ReminderInstance) -> ReminderResponse:
    return ReminderResponse(
        id=reminder.id,
        cat_id=reminder.cat_id,
        title=reminder.title,
        description=reminder.description,
        type=reminder.type,
        frequency=reminder.frequency,
        scheduled_time=reminder.scheduled_time,
        is_active=reminder.is_active,
        is_completed=reminder.is_completed,
        notification_enabled=reminder.notification_enabled,
        created_at=reminder.created_at,
        updated_at=reminder.updated_at,
    )


def _get_or_404(store: SQLiteCareStore, reminder_id: str) -> ReminderInstance:
    reminder = store.get_reminder(reminder_id)
    if reminder is None:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder


@router.post("", response_model=ReminderResponse)
def create(payload: ReminderCreateRequest, request: Request) -> ReminderResponse:
    try:
        reminder = create_reminder(
            _store(),
            cat_id=payload.cat_id,
            title=payload.title,
            description=payload.description,
            type=payload.type,
            frequency=payload.frequency,
            scheduled_time=payload.scheduled_time,
            notification_enabled=payload.notification_enabled,
            is_active=payload.is_active,
            tz=config.reminder_timezone(),
        )
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    notifier = _notifier(request)
    if notifier is not None:
        notifier.arm(reminder)
    return _to_response(reminder)


@router.get("", response_model=List[ReminderResponse])
def list_all(active_only: bool = False, cat_id: Optional[str] = None) -> List[ReminderResponse]:
    store = _store()
    if cat_id is not None:
        reminders = [
            reminder
            for reminder in reminders_for_cat(store, cat_id)
            if reminder.is_active or not active_only
        ]
    else:
        reminders = list_reminders(store, active_only=active_only)
    return [_to_response(reminder) for reminder in reminders]


@router.get("/upcoming", response_model=List[ReminderResponse])
def upcoming(hours: int = 24) -> List[ReminderResponse]:
    return [_to_response(reminder) for reminder in upcoming_reminders(_store(), hours=hours)]


@router.post("/generate", response_model=GenerateResponse)
def generate(request: Request) -> GenerateResponse:
    notifier = _notifier(request)
    now = dt.datetime.now(dt.timezone.utc)
    try:
        if notifier is not None:
            created = notifier.regenerate(now=now)
        else:
            with span("reminder.regenerate"):
                created = generate_recurring_instances(
                    _store(),
                    now=now,
                    horizon_months=config.horizon_months(),
                    tz=config.reminder_timezone(),
                )
    except ReminderInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    horizon = default_horizon(now, months=config.horizon_months())
    return GenerateResponse(generated=len(created), horizon=horizon)


@router.get("/{reminder_id}", response_model=ReminderResponse)
def get(reminder_id: str) -> ReminderResponse:
    return _to_response(_get_or_404(_store(), reminder_id))


@router.patch("/{reminder_id}", response_model=ReminderResponse)
def update(reminder_id: str, payload: ReminderUpdateRequest, request: Request) -> ReminderResponse:
    store = _store()
    reminder = _get_or_404(store, reminder_id)
    try:
        updated = update_reminder(
            store,
            reminder,
            cat_id=payload.cat_id,
            title=payload.title,
            description=payload.description,
            type=payload.type,
            frequency=payload.frequency,
            scheduled_time=payload.scheduled_time,
            is_active=payload.is_active,
            is_completed=payload.is_completed,
            notification_enabled=payload.notification_enabled,
            tz=config.reminder_timezone(),
        )
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    notifier = _notifier(request)
    if notifier is not None:
        notifier.arm(updated)
    return _to_response(updated)


@router.post("/{reminder_id}/toggle", response_model=ReminderResponse)
def toggle(reminder_id: str, request: Request) -> ReminderResponse:
    store = _store()
    updated = toggle_reminder(store, _get_or_404(store, reminder_id))
    notifier = _notifier(request)
    if notifier is not None:
        notifier.arm(updated)
    return _to_response(updated)


@router.get("/{reminder_id}/calendar.ics")
def calendar_export(reminder_id: str, duration_minutes: int = 30) -> Response:
    reminder = _get_or_404(_store(), reminder_id)
    return Response(
        content=reminder_ics(reminder, duration_minutes=duration_minutes),
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="reminder.ics"'},
    )


@router.delete("/{reminder_id}")
def delete(reminder_id: str, request: Request) -> Dict[str, Any]:
    store = _store()
    _get_or_404(store, reminder_id)
    delete_reminder(store, reminder_id)
    notifier = _notifier(request)
    if notifier is not None:
        notifier.disarm(reminder_id)
    return {"status": "deleted", "id": reminder_id}
