from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.registrations.models import Registration


class AttendanceRecord(Base):
    __tablename__ = 'attendance_records'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    # Unique: one attendance record per registration, enforced by the database
    registration_id = Column(
        Integer,
        ForeignKey('event_registrations.id'),
        nullable=False,
        unique=True,
    )
    scanned_by = Column(Integer, ForeignKey('users.id'), nullable=False)
    check_in_time = Column(DateTime, nullable=False, default=current_time)

    registration: Mapped['Registration'] = relationship(
        'Registration', back_populates='attendance'
    )
