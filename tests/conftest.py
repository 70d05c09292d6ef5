"""Shared fixtures."""
import json
import pytest
from attendance_tracker import create_app, db
from attendance_tracker.services.user_service import UserService

STUDENT_PASSWORD = 'student123'
ADMIN_PASSWORD = 'admin123'


@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def admin(app):
    return UserService.create_user(
        username='admin',
        password=ADMIN_PASSWORD,
        name='Admin User',
        email='admin@example.com',
        role='admin'
    )


@pytest.fixture
def students(app):
    return [
        UserService.create_user(
            username=f'student{i}',
            password=STUDENT_PASSWORD,
            name=f'Student {i}',
            email=f'student{i}@example.com'
        )
        for i in range(1, 4)
    ]


def _login(app, username, password):
    """Log in on a throwaway client so the caller's client keeps no cookie."""
    response = app.test_client().post('/api/login', json={
        'username': username,
        'password': password
    })
    assert response.status_code == 200, response.data
    token = json.loads(response.data)['data']['access_token']
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(app, admin):
    return _login(app, 'admin', ADMIN_PASSWORD)


@pytest.fixture
def student_headers(app, students):
    return _login(app, 'student1', STUDENT_PASSWORD)


@pytest.fixture
def login_as(app):
    """Return a function that logs a user in and gives back auth headers."""
    def _login_as(username, password):
        return _login(app, username, password)
    return _login_as
