"""Attendance session API endpoints."""
from flask import Blueprint, request

from attendance_tracker.services.attendance_service import AttendanceService
from attendance_tracker.services.qr_service import QRService
from attendance_tracker.services.session_service import SessionService
from attendance_tracker.utils.decorators import admin_required, login_required
from attendance_tracker.utils.errors import NotFoundError
from attendance_tracker.utils.helpers import error_response, success_response
from attendance_tracker.utils.validators import SessionCreateSchema, SessionUpdateSchema

sessions_bp = Blueprint('sessions', __name__)


def _get_or_404(session_id):
    session = SessionService.get_session(session_id)
    if not session:
        raise NotFoundError("Session not found")
    return session


@sessions_bp.route('', methods=['POST'])
@admin_required
def create_session():
    """Start a new session; any active one is closed first."""
    data = SessionCreateSchema.load(request.get_json(silent=True))

    session = SessionService.create_session(
        name=data['name'],
        date=data['date'],
        time=data['time'],
        duration=data['duration'],
        qr_code=data.get('qrCode')
    )

    return success_response(data=session.to_dict(), message="Session created successfully", status_code=201)


@sessions_bp.route('', methods=['GET'])
@login_required
def get_sessions():
    sessions = SessionService.list_sessions()
    return success_response(data=[session.to_dict() for session in sessions])


@sessions_bp.route('/active', methods=['GET'])
@login_required
def get_active_session():
    """Current session accepting check-ins."""
    session = SessionService.get_active_session()

    if not session:
        return error_response(
            "No active session found. Please wait for an admin to start a new session.", 404
        )

    return success_response(data=session.to_dict())


@sessions_bp.route('/<id:session_id>', methods=['GET'])
@login_required
def get_session(session_id):
    return success_response(data=_get_or_404(session_id).to_dict())


@sessions_bp.route('/<id:session_id>/qr', methods=['GET'])
@admin_required
def get_session_qr(session_id):
    """QR payload and a rendered PNG for display."""
    session = _get_or_404(session_id)
    payload = session.qr_code or QRService.build_payload(session)

    return success_response(data={
        'session_id': session.id,
        'payload': payload,
        'qr_image': QRService.render_png(payload),
        'expires_at': session.expires_at.isoformat(),
        'is_active': session.is_active
    })


@sessions_bp.route('/<id:session_id>', methods=['PUT'])
@admin_required
def update_session(session_id):
    data = SessionUpdateSchema.load(request.get_json(silent=True), partial=True)
    if 'qrCode' in data:
        data['qr_code'] = data.pop('qrCode')

    session = SessionService.update_session(session_id, **data)
    if not session:
        raise NotFoundError("Session not found")

    return success_response(data=session.to_dict(), message="Session updated successfully")


@sessions_bp.route('/<id:session_id>', methods=['DELETE'])
@admin_required
def delete_session(session_id):
    if not SessionService.delete_session(session_id):
        raise NotFoundError("Session not found")
    return '', 204


@sessions_bp.route('/<id:session_id>/expire', methods=['PUT'])
@admin_required
def expire_session(session_id):
    """Close a session and mark every student without a record absent."""
    result = SessionService.expire_session(session_id)
    if result is None:
        raise NotFoundError("Session not found")

    return success_response(
        data={
            'session': result.session.to_dict(),
            'absent_students': result.absent_count,
            'summary': AttendanceService.summarize_session(session_id)
        },
        message="Session expired successfully"
    )
