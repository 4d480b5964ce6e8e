from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
    EVENT_REMINDER = 'event_reminder'
    EVENT_CANCELLED = 'event_cancelled'
    NEW_EVENT = 'new_event'
    ANNOUNCEMENT = 'announcement'
    FEEDBACK_RECEIVED = 'feedback_received'
    ACCOUNT_STATUS = 'account_status'


class NotificationCreate(BaseModel):
    user_id: int
    type: NotificationType
    title: str
    message: str
    event_id: Optional[int] = None

    model_config = ConfigDict(
        use_enum_values=True,
    )


class Notification(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    event_id: Optional[int] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
    )


class MarkedAsRead(BaseModel):
    message: str
    updated: int
