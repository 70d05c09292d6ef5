"""Test authentication endpoints."""
import json
from attendance_tracker.services.user_service import UserService

STUDENT_PASSWORD = 'student123'


def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['status'] == 'healthy'


def test_login_success(client, students):
    response = client.post('/api/login',
        json={
            'username': 'student1',
            'password': STUDENT_PASSWORD
        })

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['error'] == False
    assert data['data']['username'] == 'student1'
    assert data['data']['role'] == 'student'
    assert data['data']['name'] == 'Student 1'
    assert 'access_token' in data['data']


def test_login_invalid_credentials(client, students):
    response = client.post('/api/login',
        json={
            'username': 'student1',
            'password': 'wrongpassword'
        })
    assert response.status_code == 401
    data = json.loads(response.data)
    assert data['error'] is True
    assert data['message'] == 'Invalid username or password'

    response = client.post('/api/login',
        json={
            'username': 'nobody',
            'password': 'whatever'
        })
    assert response.status_code == 401


def test_login_validation(client):
    response = client.post('/api/login', json={})
    assert response.status_code == 400
    data = json.loads(response.data)
    fields = {error['field'] for error in data['errors']}
    assert fields == {'username', 'password'}


def test_login_disabled_account(client, students):
    UserService.update_user(students[0].id, status='disabled')

    response = client.post('/api/login',
        json={
            'username': 'student1',
            'password': STUDENT_PASSWORD
        })
    assert response.status_code == 401
    assert json.loads(response.data)['message'] == 'Account is disabled'


def test_get_current_user(client, students, login_as):
    headers = login_as('student1', STUDENT_PASSWORD)

    response = client.get('/api/me', headers=headers)

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['data']['username'] == 'student1'
    assert 'password_hash' not in data['data']


def test_cookie_session(client, students):
    client.post('/api/login', json={'username': 'student1', 'password': STUDENT_PASSWORD})

    response = client.get('/api/me')
    assert response.status_code == 200

    client.post('/api/logout')
    response = client.get('/api/me')
    assert response.status_code == 401


def test_me_requires_login(client):
    response = client.get('/api/me')
    assert response.status_code == 401


def test_deleted_user_token_rejected(client, students, login_as):
    headers = login_as('student1', STUDENT_PASSWORD)
    UserService.delete_user(students[0].id)

    response = client.get('/api/me', headers=headers)
    assert response.status_code == 401
