"""CSV exports of attendance data."""
import io
from typing import Dict, List

import pandas as pd

from attendance_tracker.models.user import UserRole
from attendance_tracker.services.attendance_service import AttendanceService
from attendance_tracker.services.user_service import UserService

SESSION_COLUMNS = ['user_id', 'user_name', 'status', 'method', 'check_in_time']
STUDENT_COLUMNS = ['id', 'username', 'name', 'email', 'status']


class ExportService:
    """Build CSV documents with pandas."""

    @staticmethod
    def _to_csv(rows: List[Dict], columns: List[str]) -> str:
        df = pd.DataFrame(rows, columns=columns)
        output = io.StringIO()
        df.to_csv(output, index=False)
        return output.getvalue()

    @staticmethod
    def session_attendance_csv(session_id: int) -> str:
        rows = []
        for record in AttendanceService.by_session(session_id):
            rows.append({
                'user_id': record.user_id,
                'user_name': record.user_name or '',
                'status': record.status.value,
                'method': record.method,
                'check_in_time': record.check_in_time.strftime('%Y-%m-%d %H:%M:%S')
            })
        return ExportService._to_csv(rows, SESSION_COLUMNS)

    @staticmethod
    def students_csv() -> str:
        rows = [
            {
                'id': student.id,
                'username': student.username,
                'name': student.name,
                'email': student.email,
                'status': student.status.value
            }
            for student in UserService.list_by_role(UserRole.STUDENT)
        ]
        return ExportService._to_csv(rows, STUDENT_COLUMNS)
