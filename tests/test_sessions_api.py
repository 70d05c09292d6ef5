"""Session endpoint tests."""
import json
from datetime import timedelta

from attendance_tracker import db
from attendance_tracker.models.attendance_session import AttendanceSession
from attendance_tracker.utils.helpers import utcnow

SESSION_BODY = {
    'name': 'Morning Lecture',
    'date': '2026-03-02',
    'time': '09:00',
    'duration': 60
}


def _create(client, headers, **overrides):
    response = client.post('/api/sessions', json=dict(SESSION_BODY, **overrides), headers=headers)
    assert response.status_code == 201, response.data
    return json.loads(response.data)['data']


def _push_past_deadline(session_id):
    session = db.session.get(AttendanceSession, session_id)
    session.expires_at = utcnow() - timedelta(minutes=1)
    db.session.commit()


def test_create_session(client, admin_headers):
    data = _create(client, admin_headers, qrCode='{"sessionId":"x"}')

    assert data['name'] == 'Morning Lecture'
    assert data['is_active'] is True
    assert data['duration'] == 60
    assert data['qr_code'] == '{"sessionId":"x"}'
    assert data['expires_at'] > data['created_at']


def test_create_session_requires_admin(client, student_headers):
    response = client.post('/api/sessions', json=SESSION_BODY, headers=student_headers)
    assert response.status_code == 403


def test_create_session_requires_login(client):
    response = client.post('/api/sessions', json=SESSION_BODY)
    assert response.status_code == 401


def test_create_session_validation(client, admin_headers):
    response = client.post('/api/sessions', json={
        'name': '',
        'date': '02/03/2026',
        'time': '09:00',
        'duration': 500
    }, headers=admin_headers)

    assert response.status_code == 400
    data = json.loads(response.data)
    assert data['error'] is True
    fields = {error['field'] for error in data['errors']}
    assert fields == {'name', 'date', 'duration'}


def test_duration_must_be_integer(client, admin_headers):
    for bad in ('60', True, 0, 181):
        response = client.post('/api/sessions', json=dict(SESSION_BODY, duration=bad), headers=admin_headers)
        assert response.status_code == 400


def test_new_session_closes_previous(client, admin_headers):
    first = _create(client, admin_headers, name='A')
    second = _create(client, admin_headers, name='B')

    response = client.get('/api/sessions', headers=admin_headers)
    sessions = {s['id']: s for s in json.loads(response.data)['data']}

    assert sessions[first['id']]['is_active'] is False
    assert sessions[second['id']]['is_active'] is True

    active = json.loads(client.get('/api/sessions/active', headers=admin_headers).data)['data']
    assert active['id'] == second['id']


def test_active_session_not_found(client, student_headers):
    response = client.get('/api/sessions/active', headers=student_headers)
    assert response.status_code == 404


def test_active_session_after_expiry(client, admin_headers, student_headers):
    session = _create(client, admin_headers, duration=1)
    _push_past_deadline(session['id'])

    response = client.get('/api/sessions/active', headers=student_headers)
    assert response.status_code == 404

    response = client.get(f"/api/sessions/{session['id']}", headers=student_headers)
    assert response.status_code == 200
    assert json.loads(response.data)['data']['is_active'] is False


def test_get_unknown_session(client, student_headers):
    response = client.get('/api/sessions/999', headers=student_headers)
    assert response.status_code == 404

    response = client.get(f'/api/sessions/{2**64}', headers=student_headers)
    assert response.status_code == 404
    assert json.loads(response.data)['error'] is True


def test_expire_session_reports_absentees(client, admin_headers, students):
    session = _create(client, admin_headers)

    response = client.put(f"/api/sessions/{session['id']}/expire", headers=admin_headers)

    assert response.status_code == 200
    data = json.loads(response.data)['data']
    assert data['absent_students'] == 3
    assert data['session']['is_active'] is False
    assert data['summary'] == {'total': 3, 'present': 0, 'absent': 3}


def test_expire_unknown_session(client, admin_headers):
    response = client.put('/api/sessions/999/expire', headers=admin_headers)
    assert response.status_code == 404


def test_expire_requires_admin(client, admin_headers, student_headers):
    session = _create(client, admin_headers)
    response = client.put(f"/api/sessions/{session['id']}/expire", headers=student_headers)
    assert response.status_code == 403


def test_session_qr(client, admin_headers):
    session = _create(client, admin_headers)

    response = client.get(f"/api/sessions/{session['id']}/qr", headers=admin_headers)

    assert response.status_code == 200
    data = json.loads(response.data)['data']
    assert json.loads(data['payload'])['sessionId'] == session['id']
    assert data['qr_image'].startswith('data:image/png;base64,')


def test_update_and_delete_session(client, admin_headers):
    session = _create(client, admin_headers)

    response = client.put(f"/api/sessions/{session['id']}", json={'name': 'Renamed'}, headers=admin_headers)
    assert response.status_code == 200
    assert json.loads(response.data)['data']['name'] == 'Renamed'

    response = client.put(f"/api/sessions/{session['id']}", json={'duration': 0}, headers=admin_headers)
    assert response.status_code == 400

    response = client.delete(f"/api/sessions/{session['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = client.get(f"/api/sessions/{session['id']}", headers=admin_headers)
    assert response.status_code == 404
