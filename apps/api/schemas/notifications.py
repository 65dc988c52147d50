from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class NotificationSettingsModel(BaseModel):
    push_enabled: bool = False
    email_enabled: bool = False
    email_address: Optional[str] = None
    sms_enabled: bool = False
    sms_phone: Optional[str] = None
    sms_gateway_domain: Optional[str] = None
    lead_minutes: int = Field(default=15, ge=0)


class ChannelOutcomeResponse(BaseModel):
    channel: str
    ok: bool
    error: Optional[str] = None


class TestNotificationResponse(BaseModel):
    ok: bool
    outcomes: List[ChannelOutcomeResponse]
