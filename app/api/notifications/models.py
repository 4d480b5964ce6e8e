from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from app.core.database import Base
from app.core.utils import current_time


class Notification(Base):
    __tablename__ = 'notifications'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    event_id = Column(Integer, ForeignKey('events.id'), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=current_time)
