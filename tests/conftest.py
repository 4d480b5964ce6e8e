from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.events.models import Event
from app.api.registrations.models import Registration
from app.api.users.models import User
from app.core.config import Environment, settings
from app.core.database import Base, get_db
from app.core.qr import issue_check_in_payload
from app.core.roles import UserRole
from app.core.security import create_access_token, hash_password
from app.core.utils import create_check_in_token, current_time
from main import app

TEST_PASSWORD = 'secret123'


@pytest.fixture(scope='session', autouse=True)
def check_test_environment():
    if settings.ENVIRONMENT != Environment.TEST:
        raise RuntimeError(
            f'Tests can only be executed in test environment. Current environment: {settings.ENVIRONMENT}'
        )


@pytest.fixture(scope='session', autouse=True)
def setup_test_settings():
    """Signing key and cheap bcrypt rounds for the whole test session"""
    original_secret_key = settings.SECRET_KEY
    original_rounds = settings.BCRYPT_ROUNDS

    settings.SECRET_KEY = 'test_secret_key'
    settings.BCRYPT_ROUNDS = 4

    yield

    settings.SECRET_KEY = original_secret_key
    settings.BCRYPT_ROUNDS = original_rounds


@pytest.fixture(scope='session')
def test_db_engine():
    engine = create_engine(
        settings.SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def db_session(test_db_engine):
    """Create a fresh database session for each test"""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope='function')
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def get_auth_headers(user: User) -> dict:
    """Generate auth headers for a user"""
    data = {'user_id': user.id, 'email': user.email, 'role': user.role}
    access_token = create_access_token(data=data)
    return {'Authorization': f'Bearer {access_token}'}


@pytest.fixture(scope='function')
def create_test_user(db_session):
    """Factory fixture to create test users"""

    def _create_user(
        n: int,
        role: UserRole = UserRole.STUDENT,
        status: str = 'active',
        password: str = TEST_PASSWORD,
    ) -> User:
        user = User(
            email=f'user{n}@ums.edu.my',
            password=hash_password(password),
            name=f'Test User {n}',
            role=role.value,
            status=status,
            student_id=f'BI{n:05d}',
            faculty='Computing',
        )
        db_session.add(user)
        db_session.commit()
        return user

    yield _create_user


@pytest.fixture(scope='function')
def student(create_test_user):
    return create_test_user(1)


@pytest.fixture(scope='function')
def manager(create_test_user):
    return create_test_user(100, role=UserRole.EVENT_MANAGER)


@pytest.fixture(scope='function')
def admin(create_test_user):
    return create_test_user(200, role=UserRole.ADMIN)


@pytest.fixture(scope='function')
def student_headers(student):
    return get_auth_headers(student)


@pytest.fixture(scope='function')
def manager_headers(manager):
    return get_auth_headers(manager)


@pytest.fixture(scope='function')
def admin_headers(admin):
    return get_auth_headers(admin)


@pytest.fixture(scope='function')
def create_test_event(db_session, manager):
    """Factory fixture to create test events"""

    def _create_event(
        capacity: int = 10,
        status: str = 'upcoming',
        starts_in: timedelta = timedelta(days=7),
        **kwargs,
    ) -> Event:
        event = Event(
            title=kwargs.pop('title', 'Tech Talk'),
            description='A talk about tech',
            start_date=current_time() + starts_in,
            venue=kwargs.pop('venue', 'Main Hall'),
            category=kwargs.pop('category', 'seminar'),
            capacity=capacity,
            registered_count=kwargs.pop('registered_count', 0),
            organizer='Computing Society',
            status=status,
            created_by=manager.id,
            **kwargs,
        )
        db_session.add(event)
        db_session.commit()
        return event

    yield _create_event


@pytest.fixture(scope='function')
def test_event(create_test_event):
    return create_test_event()


@pytest.fixture(scope='function')
def create_test_registration(db_session):
    """Register a user for an event directly in the database"""

    def _create_registration(user: User, event: Event) -> Registration:
        registration = Registration(
            event_id=event.id,
            user_id=user.id,
            check_in_token=create_check_in_token(),
            status='registered',
        )
        event.registered_count += 1
        db_session.add(registration)
        db_session.commit()
        return registration

    yield _create_registration


@pytest.fixture(scope='function')
def test_registration(create_test_registration, student, test_event):
    return create_test_registration(student, test_event)


@pytest.fixture(scope='function')
def test_payload(test_registration):
    return issue_check_in_payload(test_registration.check_in_token)


@pytest.fixture(scope='function')
def file_session_factory(tmp_path):
    """Sessions on a file-backed database so each thread gets its own connection"""
    engine = create_engine(
        f'sqlite:///{tmp_path / "concurrency.db"}',
        connect_args={'check_same_thread': False, 'timeout': 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()
