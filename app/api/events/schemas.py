from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EventCategory(str, Enum):
    ACADEMIC = 'academic'
    SPORTS = 'sports'
    CULTURAL = 'cultural'
    WORKSHOP = 'workshop'
    SEMINAR = 'seminar'
    COMPETITION = 'competition'
    SOCIAL = 'social'


class EventStatus(str, Enum):
    UPCOMING = 'upcoming'
    ONGOING = 'ongoing'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    @classmethod
    def open_for_registration(cls):
        return [cls.UPCOMING.value, cls.ONGOING.value]


# Allowed status changes; completed and cancelled are terminal
STATUS_TRANSITIONS = {
    EventStatus.UPCOMING: {EventStatus.ONGOING, EventStatus.CANCELLED},
    EventStatus.ONGOING: {EventStatus.COMPLETED, EventStatus.CANCELLED},
    EventStatus.COMPLETED: set(),
    EventStatus.CANCELLED: set(),
}


class EventBase(BaseModel):
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    venue: Optional[str] = None
    category: EventCategory
    capacity: int = Field(ge=0)
    image_url: Optional[str] = None
    organizer: Optional[str] = None

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError('end_date must be after start_date')
        return self


class EventCreate(EventBase):
    pass


class InternalEventCreate(EventCreate):
    status: EventStatus = EventStatus.UPCOMING
    registered_count: int = 0
    created_by: Optional[int] = None

    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
    )


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    venue: Optional[str] = None
    category: Optional[EventCategory] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    organizer: Optional[str] = None

    model_config = ConfigDict(
        use_enum_values=True,
    )

    @field_validator('title', 'start_date', 'category', 'capacity')
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v


class EventStatusUpdate(BaseModel):
    status: EventStatus


class Event(EventBase):
    id: int
    registered_count: int
    status: EventStatus
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
    )


class EventFilter(BaseModel):
    status: Optional[EventStatus] = None
    category: Optional[EventCategory] = None


class EventRegistrant(BaseModel):
    registration_id: int
    user_id: int
    name: str
    email: str
    student_id: Optional[str] = None
    faculty: Optional[str] = None
    status: str
    registered_at: Optional[datetime] = None
