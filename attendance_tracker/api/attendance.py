"""Attendance API endpoints."""
from flask import Blueprint, request
from flask_jwt_extended import current_user

from attendance_tracker.services.attendance_service import AttendanceService
from attendance_tracker.services.qr_service import QRService
from attendance_tracker.services.session_service import SessionService
from attendance_tracker.services.user_service import UserService
from attendance_tracker.utils.decorators import login_required, self_or_admin
from attendance_tracker.utils.errors import NotFoundError, SessionClosedError, ValidationError
from attendance_tracker.utils.helpers import success_response
from attendance_tracker.utils.validators import AttendanceMarkSchema

attendance_bp = Blueprint('attendance', __name__)


def _read_mark_request() -> dict:
    """Accept either a sessionId or the raw scanned QR text."""
    body = request.get_json(silent=True)

    if isinstance(body, dict) and body.get('sessionId') is None and 'qrData' in body:
        is_valid, qr_info, error_msg = QRService.parse_payload(body['qrData'])
        if not is_valid:
            raise ValidationError([{'field': 'qrData', 'message': error_msg}])
        body = dict(body, sessionId=qr_info['sessionId'])

    return AttendanceMarkSchema.load(body)


@attendance_bp.route('', methods=['POST'])
@login_required
def mark_attendance():
    """Check in to the active session; admins may mark on behalf of a user."""
    data = _read_mark_request()

    session = SessionService.get_session(data['sessionId'])
    if not session:
        raise NotFoundError("Session not found")

    if not session.is_active:
        if session.is_expired():
            raise SessionClosedError("Session has expired")
        raise SessionClosedError("Session is not active")

    target = current_user
    method = 'qr'
    if data['manual'] and current_user.is_admin():
        if 'userId' not in data:
            raise ValidationError([{'field': 'userId', 'message': 'Required for manual attendance'}])
        target = UserService.get_user(data['userId'])
        if not target:
            raise NotFoundError("User not found")
        method = 'manual'

    record = AttendanceService.mark_attendance(
        user_id=target.id,
        session_id=session.id,
        name=target.name,
        method=method
    )

    return success_response(data=record.to_dict(), message="Attendance marked", status_code=201)


@attendance_bp.route('/me', methods=['GET'])
@login_required
def my_attendance():
    """Own records with the session each belongs to."""
    records = AttendanceService.by_user(current_user.id)
    sessions = {session.id: session for session in SessionService.list_sessions()}

    enriched = []
    for record in records:
        item = record.to_dict()
        session = sessions.get(record.session_id)
        item['session'] = session.to_dict() if session else None
        enriched.append(item)

    return success_response(data=enriched)


@attendance_bp.route('/session/<id:session_id>', methods=['GET'])
@login_required
def session_attendance(session_id):
    records = AttendanceService.by_session(session_id)

    if not current_user.is_admin():
        records = [record for record in records if record.user_id == current_user.id]

    return success_response(data=[record.to_dict() for record in records])


@attendance_bp.route('/user/<id:user_id>', methods=['GET'])
@self_or_admin('user_id')
def user_attendance(user_id):
    records = AttendanceService.by_user(user_id)
    return success_response(data=[record.to_dict() for record in records])
