from __future__ import annotations

import os
import smtplib
from email.message import EmailMessage
from typing import List, Optional, Protocol

import httpx

from .config import NotificationSettings, is_valid_email
from .models import ChannelOutcome, NotificationPayload


APP_NAME = "CatCare Scheduler"


class ChannelError(RuntimeError):
    """A delivery channel could not send a notification."""


class NotificationChannel(Protocol):
    name: str

    def send(self, payload: NotificationPayload) -> ChannelOutcome:
        """Deliver ``payload``. Raises ChannelError on failure."""


def _smtp_config() -> dict:
    return {
        "host": os.getenv("SMTP_HOST", ""),
        "port": int(os.getenv("SMTP_PORT", "587")),
        "user": os.getenv("SMTP_USER", ""),
        "password": os.getenv("SMTP_PASSWORD", ""),
        "from_email": os.getenv("SMTP_FROM", ""),
        "use_tls": os.getenv("SMTP_USE_TLS", "true").lower() == "true",
    }


def send_email(to_email: str, subject: str, body: str) -> None:
    config = _smtp_config()
    if not config["host"] or not config["from_email"]:
        raise ChannelError("SMTP is not configured. Set SMTP_HOST and SMTP_FROM.")

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = config["from_email"]
    message["To"] = to_email
    message.set_content(body)

    with smtplib.SMTP(config["host"], config["port"]) as server:
        if config["use_tls"]:
            server.starttls()
        if config["user"]:
            server.login(config["user"], config["password"])
        server.send_message(message)


def _email_body(payload: NotificationPayload) -> str:
    lines = [
        payload.message,
        "",
        f"Cat: {payload.cat_name or 'Your cat'}",
        f"Type: {payload.type.value}",
        f"Scheduled: {payload.scheduled_time.isoformat()}",
        "",
        f"-- {APP_NAME}",
    ]
    return "\n".join(lines)


def _sms_text(payload: NotificationPayload) -> str:
    text = f"CatCare: {payload.title} - {payload.message}"
    if payload.cat_name:
        text = f"{text} ({payload.cat_name})"
    return text


class EmailChannel:
    name = "email"

    def __init__(self, to_email: str) -> None:
        self._to_email = to_email

    def send(self, payload: NotificationPayload) -> ChannelOutcome:
        if not is_valid_email(self._to_email):
            raise ChannelError(f"Invalid email address: {self._to_email}")
        send_email(
            self._to_email,
            f"Cat Care Reminder: {payload.title}",
            _email_body(payload),
        )
        return ChannelOutcome(channel=self.name, ok=True)


class SmsChannel:
    """SMS through the carrier's email-to-SMS gateway."""

    name = "sms"

    def __init__(self, phone: str, gateway_domain: str) -> None:
        self._phone = phone
        self._gateway_domain = gateway_domain

    def send(self, payload: NotificationPayload) -> ChannelOutcome:
        to_email = f"{self._phone}@{self._gateway_domain}"
        send_email(to_email, f"Reminder: {payload.title}", _sms_text(payload))
        return ChannelOutcome(channel=self.name, ok=True)


class PushChannel:
    name = "push"

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 10) -> None:
        self._webhook_url = webhook_url or os.getenv("PUSH_WEBHOOK_URL", "")
        self._timeout = timeout

    def send(self, payload: NotificationPayload) -> ChannelOutcome:
        if not self._webhook_url:
            raise ChannelError("Push is not configured. Set PUSH_WEBHOOK_URL.")
        response = httpx.post(
            self._webhook_url,
            json={
                "title": payload.title,
                "body": payload.message,
                "tag": f"cat-care-{payload.type.value}",
                "cat_name": payload.cat_name,
                "scheduled_time": payload.scheduled_time.isoformat(),
            },
            timeout=self._timeout,
        )
        response.raise_for_status()
        return ChannelOutcome(channel=self.name, ok=True)


def build_channels(settings: NotificationSettings) -> List[NotificationChannel]:
    channels: List[NotificationChannel] = []
    if settings.push_enabled:
        channels.append(PushChannel())
    if settings.email_enabled and settings.email_address:
        channels.append(EmailChannel(settings.email_address))
    if settings.sms_enabled and settings.sms_phone and settings.sms_gateway_domain:
        channels.append(SmsChannel(settings.sms_phone, settings.sms_gateway_domain))
    return channels
