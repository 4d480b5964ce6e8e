from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.attendance.models import AttendanceRecord
    from app.api.events.models import Event
    from app.api.users.models import User


class Registration(Base):
    __tablename__ = 'event_registrations'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    event_id = Column(Integer, ForeignKey('events.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    check_in_token = Column(String, nullable=False, unique=True, index=True)
    status = Column(String, nullable=False, default='registered')

    event: Mapped['Event'] = relationship('Event', back_populates='registrations')
    user: Mapped['User'] = relationship('User', back_populates='registrations')
    attendance: Mapped[Optional['AttendanceRecord']] = relationship(
        'AttendanceRecord', back_populates='registration', uselist=False
    )

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_registration_event_user'),
    )
