from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from packages.core.reminders.models import Frequency, ReminderType


class ReminderCreateRequest(BaseModel):
    cat_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: ReminderType = ReminderType.OTHER
    frequency: Frequency = Frequency.ONCE
    scheduled_time: dt.datetime
    notification_enabled: bool = True
    is_active: bool = True


class ReminderUpdateRequest(BaseModel):
    cat_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ReminderType] = None
    frequency: Optional[Frequency] = None
    scheduled_time: Optional[dt.datetime] = None
    is_active: Optional[bool] = None
    is_completed: Optional[bool] = None
    notification_enabled: Optional[bool] = None


class ReminderResponse(BaseModel):
    id: str
    cat_id: str
    title: str
    description: Optional[str]
    type: ReminderType
    frequency: Frequency
    scheduled_time: dt.datetime
    is_active: bool
    is_completed: bool
    notification_enabled: bool
    created_at: str
    updated_at: str


class GenerateResponse(BaseModel):
    generated: int
    horizon: dt.datetime
