from datetime import timedelta

import pytest

from app.api.notifications.models import Notification
from app.api.users.models import User
from app.core.security import verify_password
from app.processes.event_reminders import send_event_reminders
from app.processes.init_admin import ensure_admin


def test_event_reminders(db_session, create_test_user, create_test_event, create_test_registration):
    soon = create_test_event(starts_in=timedelta(hours=2), title='Soon')
    later = create_test_event(starts_in=timedelta(days=3), title='Later')
    cancelled = create_test_event(starts_in=timedelta(hours=2), status='cancelled')
    u1, u2 = create_test_user(1), create_test_user(2)
    for event in (soon, later, cancelled):
        create_test_registration(u1, event)
    create_test_registration(u2, soon)

    assert send_event_reminders(db_session) == 2

    reminders = db_session.query(Notification).all()
    assert {n.user_id for n in reminders} == {u1.id, u2.id}
    assert all(n.event_id == soon.id for n in reminders)
    assert all(n.type == 'event_reminder' for n in reminders)
    assert reminders[0].title == 'Reminder: Soon'
    assert 'Main Hall' in reminders[0].message


def test_event_reminders_not_sent_twice(
    db_session, create_test_user, create_test_event, create_test_registration
):
    event = create_test_event(starts_in=timedelta(hours=5))
    create_test_registration(create_test_user(1), event)

    assert send_event_reminders(db_session) == 1
    assert send_event_reminders(db_session) == 0

    create_test_registration(create_test_user(2), event)
    assert send_event_reminders(db_session) == 1
    assert db_session.query(Notification).count() == 2


def test_ensure_admin_creates_account(db_session):
    admin = ensure_admin(db_session, 'Admin@UMS.edu.my', 'adminpass', 'Administrator')

    assert admin.email == 'admin@ums.edu.my'
    assert admin.role == 'admin'
    assert admin.status == 'active'
    assert verify_password('adminpass', admin.password)


def test_ensure_admin_resets_existing_account(db_session, create_test_user):
    user = create_test_user(5, status='suspended')

    admin = ensure_admin(db_session, user.email, 'newpass123', 'Administrator')

    assert admin.id == user.id
    assert admin.role == 'admin'
    assert admin.status == 'active'
    assert verify_password('newpass123', admin.password)
    assert db_session.query(User).count() == 1


def test_ensure_admin_requires_password(db_session):
    with pytest.raises(ValueError):
        ensure_admin(db_session, 'admin@ums.edu.my', '', 'Administrator')
