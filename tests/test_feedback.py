from fastapi import status

from app.api.feedback.models import Feedback
from app.api.notifications.models import Notification
from tests.conftest import get_auth_headers


def test_submit_feedback(client, student, student_headers, manager, test_event, db_session):
    response = client.post(
        f'/events/{test_event.id}/feedback',
        json={'rating': 4, 'comment': 'Great talk'},
        headers=student_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()['message'] == 'Feedback submitted successfully'

    feedback = db_session.query(Feedback).one()
    assert feedback.user_id == student.id
    assert feedback.rating == 4

    notification = db_session.query(Notification).filter_by(user_id=manager.id).one()
    assert notification.type == 'feedback_received'
    assert notification.event_id == test_event.id


def test_submit_feedback_twice(client, student_headers, test_event, db_session):
    client.post(
        f'/events/{test_event.id}/feedback', json={'rating': 4}, headers=student_headers
    )
    response = client.post(
        f'/events/{test_event.id}/feedback', json={'rating': 2}, headers=student_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert db_session.query(Feedback).count() == 1


def test_submit_feedback_invalid_rating(client, student_headers, test_event):
    for rating in (0, 6):
        response = client.post(
            f'/events/{test_event.id}/feedback',
            json={'rating': rating},
            headers=student_headers,
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_submit_feedback_unknown_event(client, student_headers):
    response = client.post('/events/999/feedback', json={'rating': 5}, headers=student_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()['detail'] == 'Event not found'


def test_own_event_feedback_does_not_notify(client, manager_headers, test_event, db_session):
    response = client.post(
        f'/events/{test_event.id}/feedback', json={'rating': 5}, headers=manager_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert db_session.query(Notification).count() == 0


def test_anonymous_feedback_hides_name(
    client, student_headers, create_test_user, test_event
):
    other = create_test_user(2)
    client.post(
        f'/events/{test_event.id}/feedback',
        json={'rating': 5, 'comment': 'Loved it'},
        headers=student_headers,
    )
    client.post(
        f'/events/{test_event.id}/feedback',
        json={'rating': 3, 'is_anonymous': True},
        headers=get_auth_headers(other),
    )

    response = client.get(f'/events/{test_event.id}/feedback', headers=student_headers)
    assert response.status_code == status.HTTP_200_OK
    names = {entry['rating']: entry['user_name'] for entry in response.json()}
    assert names == {5: 'Test User 1', 3: None}


def test_feedback_stats(client, create_test_user, test_event, student_headers):
    for n, rating in enumerate((5, 4, 4), start=1):
        user = create_test_user(n + 10)
        client.post(
            f'/events/{test_event.id}/feedback',
            json={'rating': rating},
            headers=get_auth_headers(user),
        )

    response = client.get(
        f'/events/{test_event.id}/feedback/stats', headers=student_headers
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data['total_reviews'] == 3
    assert data['average_rating'] == 4.33
    assert data['rating_distribution'] == {'1': 0, '2': 0, '3': 0, '4': 2, '5': 1}


def test_feedback_stats_without_reviews(client, student_headers, test_event):
    response = client.get(
        f'/events/{test_event.id}/feedback/stats', headers=student_headers
    )
    data = response.json()
    assert data['total_reviews'] == 0
    assert data['average_rating'] == 0.0
