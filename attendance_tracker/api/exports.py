"""CSV export endpoints."""
from flask import Blueprint

from attendance_tracker.services.export_service import ExportService
from attendance_tracker.services.session_service import SessionService
from attendance_tracker.utils.decorators import admin_required
from attendance_tracker.utils.errors import NotFoundError

exports_bp = Blueprint('exports', __name__)


def _csv(body: str, filename: str):
    return body, 200, {
        'Content-Type': 'text/csv; charset=utf-8',
        'Content-Disposition': f'attachment; filename={filename}'
    }


@exports_bp.route('/attendance/<id:session_id>', methods=['GET'])
@admin_required
def export_session_attendance(session_id):
    if not SessionService.get_session(session_id):
        raise NotFoundError("Session not found")
    return _csv(
        ExportService.session_attendance_csv(session_id),
        f'attendance_session_{session_id}.csv'
    )


@exports_bp.route('/students', methods=['GET'])
@admin_required
def export_students():
    return _csv(ExportService.students_csv(), 'students_export.csv')
