from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request

from apps.api.schemas.notifications import (
    ChannelOutcomeResponse,
    NotificationSettingsModel,
    TestNotificationResponse,
)
from packages.core import config
from packages.core.notifications.config import (
    NotificationConfigError,
    NotificationSettings,
    load_notification_settings,
    save_notification_settings,
)
from packages.core.notifications.dispatcher import send_test_notification


router = APIRouter(prefix="/notifications", tags=["notifications"])


def _settings_path() -> str:
    return config.notification_settings_path()


@router.get("/settings", response_model=NotificationSettingsModel)
def get_settings() -> NotificationSettingsModel:
    return NotificationSettingsModel(**asdict(load_notification_settings(_settings_path())))


@router.put("/settings", response_model=NotificationSettingsModel)
def put_settings(payload: NotificationSettingsModel, request: Request) -> NotificationSettingsModel:
    settings = NotificationSettings(**payload.model_dump())
    save_notification_settings(settings, _settings_path())
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is not None:
        notifier.update_settings(settings)
    return NotificationSettingsModel(**asdict(settings))


@router.post("/test", response_model=TestNotificationResponse)
def test_notification() -> TestNotificationResponse:
    settings = load_notification_settings(_settings_path())
    try:
        report = send_test_notification(settings)
    except NotificationConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TestNotificationResponse(
        ok=report.ok,
        outcomes=[
            ChannelOutcomeResponse(channel=outcome.channel, ok=outcome.ok, error=outcome.error)
            for outcome in report.outcomes
        ],
    )
