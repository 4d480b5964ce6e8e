from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError

from app.api.events.crud import event as event_crud
from app.api.events.models import Event
from app.api.notifications.models import Notification
from app.core.utils import current_time


def _event_data(**overrides):
    data = {
        'title': 'Hackathon',
        'description': 'Build something in 24 hours',
        'start_date': (current_time() + timedelta(days=3)).isoformat(),
        'venue': 'Lab 3',
        'category': 'competition',
        'capacity': 50,
        'organizer': 'Computing Society',
    }
    data.update(overrides)
    return data


def test_list_events_is_public(client, create_test_event):
    later = create_test_event(title='Later', starts_in=timedelta(days=10))
    sooner = create_test_event(title='Sooner', starts_in=timedelta(days=1))

    response = client.get('/events')
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [e['id'] for e in data] == [sooner.id, later.id]


def test_list_events_filtered(client, create_test_event):
    create_test_event(title='Open')
    cancelled = create_test_event(title='Gone', status='cancelled')
    create_test_event(title='Match', category='sports')

    response = client.get('/events', params={'status': 'cancelled'})
    data = response.json()
    assert len(data) == 1
    assert data[0]['id'] == cancelled.id

    response = client.get('/events', params={'category': 'sports'})
    data = response.json()
    assert len(data) == 1
    assert data[0]['title'] == 'Match'


def test_get_event(client, test_event):
    response = client.get(f'/events/{test_event.id}')
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['title'] == test_event.title
    assert data['registered_count'] == 0
    assert data['status'] == 'upcoming'


def test_get_event_not_found(client):
    response = client.get('/events/999')
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()['detail'] == 'Event not found'


def test_create_event(client, manager, manager_headers):
    response = client.post('/events/', json=_event_data(), headers=manager_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data['status'] == 'upcoming'
    assert data['registered_count'] == 0
    assert data['created_by'] == manager.id


def test_create_event_requires_staff(client, student_headers):
    response = client.post('/events/', json=_event_data(), headers=student_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_event_validation(client, admin_headers):
    response = client.post(
        '/events/', json=_event_data(capacity=-1), headers=admin_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    start = current_time() + timedelta(days=3)
    response = client.post(
        '/events/',
        json=_event_data(
            start_date=start.isoformat(),
            end_date=(start - timedelta(hours=1)).isoformat(),
        ),
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_update_event(client, test_event, manager_headers):
    response = client.put(
        f'/events/{test_event.id}',
        json={'venue': 'Auditorium', 'capacity': 200},
        headers=manager_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['venue'] == 'Auditorium'
    assert data['capacity'] == 200
    assert data['title'] == test_event.title


def test_update_event_capacity_below_registrations(
    client, create_test_event, create_test_user, create_test_registration, manager_headers
):
    event = create_test_event(capacity=5)
    for n in range(1, 4):
        create_test_registration(create_test_user(n), event)

    response = client.put(
        f'/events/{event.id}', json={'capacity': 2}, headers=manager_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_event_status_transitions(client, test_event, manager_headers):
    response = client.put(
        f'/events/{test_event.id}/status',
        json={'status': 'completed'},
        headers=manager_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    for new_status in ('ongoing', 'completed'):
        response = client.put(
            f'/events/{test_event.id}/status',
            json={'status': new_status},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == new_status

    response = client.put(
        f'/events/{test_event.id}/status',
        json={'status': 'cancelled'},
        headers=manager_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_cancel_event_notifies_registrants(
    client,
    test_event,
    create_test_user,
    create_test_registration,
    manager_headers,
    db_session,
):
    attendees = [create_test_user(n) for n in range(1, 3)]
    for attendee in attendees:
        create_test_registration(attendee, test_event)

    response = client.put(
        f'/events/{test_event.id}/status',
        json={'status': 'cancelled'},
        headers=manager_headers,
    )
    assert response.status_code == status.HTTP_200_OK

    notifications = (
        db_session.query(Notification)
        .filter_by(event_id=test_event.id, type='event_cancelled')
        .all()
    )
    assert sorted(n.user_id for n in notifications) == sorted(a.id for a in attendees)


def test_delete_event(client, test_event, manager_headers, db_session):
    response = client.delete(f'/events/{test_event.id}', headers=manager_headers)
    assert response.status_code == status.HTTP_200_OK
    assert db_session.query(Event).count() == 0


def test_delete_event_with_registrations(
    client, test_registration, test_event, manager_headers
):
    response = client.delete(f'/events/{test_event.id}', headers=manager_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_get_event_registrations(
    client, test_registration, test_event, student, manager_headers, student_headers
):
    response = client.get(
        f'/events/{test_event.id}/registrations', headers=manager_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]['user_id'] == student.id
    assert data[0]['student_id'] == student.student_id
    assert data[0]['status'] == 'registered'

    response = client.get(
        f'/events/{test_event.id}/registrations', headers=student_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_storage_failure_returns_server_error(client):
    error = OperationalError('SELECT', {}, Exception('database is locked'))
    with patch.object(event_crud, 'find', side_effect=error):
        response = client.get('/events/')

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {'detail': 'Server error'}


@pytest.mark.parametrize(
    'field', ['title', 'start_date', 'category', 'capacity']
)
def test_update_event_rejects_null_required_field(
    client, test_event, manager_headers, db_session, field
):
    response = client.put(
        f'/events/{test_event.id}', json={field: None}, headers=manager_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    db_session.refresh(test_event)
    assert getattr(test_event, field) is not None


@pytest.mark.parametrize('sort_by', ['is_full', 'registrations', 'unknown'])
def test_list_events_invalid_sort_field(client, test_event, sort_by):
    response = client.get('/events/', params={'sort_by': sort_by})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()['detail'] == f'Invalid sort field: {sort_by}'
