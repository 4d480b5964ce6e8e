from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, Column, DateTime, Integer, String, event
from sqlalchemy.orm import Mapped, relationship

from app.core.database import Base
from app.core.security import Token, create_access_token
from app.core.utils import current_time

if TYPE_CHECKING:
    from app.api.registrations.models import Registration


class User(Base):
    __tablename__ = 'users'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    email = Column(String, index=True, nullable=False, unique=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default='student')
    status = Column(String, nullable=False, default='active')
    student_id = Column(String)
    faculty = Column(String)
    phone = Column(String)
    email_verified = Column(Boolean, default=False)
    last_login = Column(DateTime)

    registrations: Mapped[List['Registration']] = relationship(
        'Registration', back_populates='user'
    )

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)

    def get_authorization(self) -> Token:
        data = {'user_id': self.id, 'email': self.email, 'role': self.role}
        return Token(
            access_token=create_access_token(data=data),
            token_type='Bearer',
        )


@event.listens_for(User, 'before_insert')
def clean_email(mapper, connection, target):
    if target.email:
        target.email = target.email.lower().strip()
