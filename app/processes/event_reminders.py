import time
from datetime import timedelta
from typing import List

from sqlalchemy.orm import Session

from app.api.events.models import Event
from app.api.events.schemas import EventStatus
from app.api.notifications.crud import notification as notification_crud
from app.api.notifications.models import Notification
from app.api.notifications.schemas import NotificationType
from app.api.registrations.models import Registration
from app.api.registrations.schemas import RegistrationStatus
from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logger import logger
from app.core.utils import current_time


def get_events_to_remind(db: Session, window: timedelta) -> List[Event]:
    now = current_time()
    return (
        db.query(Event)
        .filter(
            Event.status == EventStatus.UPCOMING.value,
            Event.start_date > now,
            Event.start_date <= now + window,
        )
        .order_by(Event.start_date.asc())
        .all()
    )


def get_reminded_user_ids(db: Session, event_id: int) -> set:
    rows = (
        db.query(Notification.user_id)
        .filter(
            Notification.event_id == event_id,
            Notification.type == NotificationType.EVENT_REMINDER.value,
        )
        .distinct()
        .all()
    )
    return {row[0] for row in rows}


def remind_event(db: Session, event: Event) -> int:
    already_reminded = get_reminded_user_ids(db, event.id)
    user_ids = [
        r.user_id
        for r in db.query(Registration)
        .filter(
            Registration.event_id == event.id,
            Registration.status == RegistrationStatus.REGISTERED.value,
        )
        .all()
        if r.user_id not in already_reminded
    ]
    if not user_ids:
        return 0

    start = event.start_date.strftime('%d %b %Y %H:%M')
    venue = f' at {event.venue}' if event.venue else ''
    return notification_crud.notify_many(
        db,
        user_ids=user_ids,
        type=NotificationType.EVENT_REMINDER,
        title=f'Reminder: {event.title}',
        message=f'{event.title} starts on {start}{venue}.',
        event_id=event.id,
    )


def send_event_reminders(db: Session) -> int:
    window = timedelta(hours=settings.REMINDER_WINDOW_HOURS)
    events = get_events_to_remind(db, window)
    logger.info('Events starting in the next %s: %s', window, len(events))

    total = 0
    for event in events:
        sent = remind_event(db, event)
        logger.info('Sent %s reminders for event %s', sent, event.id)
        total += sent
    return total


def main():
    while True:
        with SessionLocal() as db:
            total = send_event_reminders(db)
        logger.info('Sent %s reminders. Sleeping for 1 hour...', total)
        time.sleep(1 * 60 * 60)


if __name__ == '__main__':
    main()
