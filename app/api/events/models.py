from typing import TYPE_CHECKING, List

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.registrations.models import Registration


class Event(Base):
    __tablename__ = 'events'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    title = Column(String, index=True, nullable=False)
    description = Column(Text)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime)
    venue = Column(String)
    category = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)
    registered_count = Column(Integer, nullable=False, default=0)
    image_url = Column(String)
    organizer = Column(String)
    status = Column(String, nullable=False, default='upcoming')
    created_by = Column(Integer, ForeignKey('users.id'))

    registrations: Mapped[List['Registration']] = relationship(
        'Registration', back_populates='event'
    )

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    __table_args__ = (
        CheckConstraint('capacity >= 0', name='ck_events_capacity'),
        CheckConstraint(
            'registered_count >= 0 AND registered_count <= capacity',
            name='ck_events_registered_count',
        ),
    )

    @property
    def is_full(self) -> bool:
        return self.registered_count >= self.capacity
