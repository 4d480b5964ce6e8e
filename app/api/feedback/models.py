from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)

from app.core.database import Base
from app.core.utils import current_time


class Feedback(Base):
    __tablename__ = 'event_feedback'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    event_id = Column(Integer, ForeignKey('events.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text)
    is_anonymous = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=current_time)

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_feedback_event_user'),
        CheckConstraint('rating >= 1 AND rating <= 5', name='ck_feedback_rating'),
    )
