from enum import Enum


class UserRole(str, Enum):
    STUDENT = 'student'
    EVENT_MANAGER = 'event_manager'
    ADMIN = 'admin'

    @classmethod
    def all(cls):
        return [r.value for r in cls]
