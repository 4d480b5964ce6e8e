# Import all models here to ensure SQLAlchemy can set up relationships correctly
from app.api.attendance.models import AttendanceRecord
from app.api.events.models import Event
from app.api.feedback.models import Feedback
from app.api.notifications.models import Notification
from app.api.registrations.models import Registration
from app.api.users.models import User

# Re-export all models
__all__ = [
    'AttendanceRecord',
    'Event',
    'Feedback',
    'Notification',
    'Registration',
    'User',
]
