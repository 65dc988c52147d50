from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Iterable, List, Optional

from ..reminders.models import ReminderInstance, ReminderType
from .channels import NotificationChannel, build_channels
from .config import (
    NotificationConfigError,
    NotificationSettings,
    validate_notification_settings,
)
from .models import ChannelOutcome, DispatchReport, NotificationPayload, payload_for


logger = logging.getLogger("catcare.notifications")


class NotificationDispatcher:
    """Fans one payload out to every channel.

    A failing channel is logged and reported in the returned DispatchReport;
    it never stops the remaining channels and never raises to the caller.
    """

    def __init__(
        self,
        channels: Iterable[NotificationChannel],
        cat_name_for: Optional[Callable[[str], Optional[str]]] = None,
    ) -> None:
        self._channels: List[NotificationChannel] = list(channels)
        self._cat_name_for = cat_name_for

    @property
    def channels(self) -> List[NotificationChannel]:
        return list(self._channels)

    def dispatch(self, payload: NotificationPayload) -> DispatchReport:
        outcomes = []
        for channel in self._channels:
            try:
                outcome = channel.send(payload)
            except Exception as exc:
                logger.exception(
                    "channel_send_failed channel=%s title=%s error=%s",
                    channel.name,
                    payload.title,
                    exc,
                )
                outcome = ChannelOutcome(channel=channel.name, ok=False, error=str(exc))
            outcomes.append(outcome)
        report = DispatchReport(outcomes=outcomes)
        logger.info(
            "notification_dispatched title=%s succeeded=%s failed=%s",
            payload.title,
            ",".join(report.succeeded) or "-",
            ",".join(report.failed) or "-",
        )
        return report

    def deliver(self, instance: ReminderInstance) -> DispatchReport:
        cat_name = None
        if self._cat_name_for is not None:
            try:
                cat_name = self._cat_name_for(instance.cat_id)
            except Exception as exc:
                logger.warning("cat_lookup_failed cat_id=%s error=%s", instance.cat_id, exc)
        return self.dispatch(payload_for(instance, cat_name=cat_name))


def send_test_notification(
    settings: NotificationSettings,
    channels: Optional[Iterable[NotificationChannel]] = None,
) -> DispatchReport:
    issues = validate_notification_settings(settings)
    if issues:
        raise NotificationConfigError("; ".join(issues))
    dispatcher = NotificationDispatcher(channels if channels is not None else build_channels(settings))
    return dispatcher.dispatch(
        NotificationPayload(
            title="Test Notification",
            message="This is a test notification from CatCare. Your notification setup works.",
            type=ReminderType.OTHER,
            scheduled_time=dt.datetime.now(dt.timezone.utc),
            cat_name="Test Cat",
        )
    )
