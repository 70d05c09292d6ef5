"""Attendance recording service.

Owns the "one record per (session, user)" rule and the close-out that
back-fills ``absent`` rows when a session ends.
"""
from datetime import datetime
from typing import Dict, List, Optional

from flask import current_app

from attendance_tracker import db
from attendance_tracker.models.attendance import AttendanceRecord, AttendanceStatus
from attendance_tracker.models.base import commit
from attendance_tracker.models.user import User, UserRole
from attendance_tracker.utils.errors import ConflictError
from attendance_tracker.utils.helpers import utcnow

DUPLICATE_MESSAGE = "Attendance already marked for this session"


class AttendanceService:
    """Service for attendance records."""

    @staticmethod
    def mark_attendance(
        user_id: int,
        session_id: int,
        name: Optional[str],
        method: str = 'qr',
        now: Optional[datetime] = None
    ) -> AttendanceRecord:
        """Insert a ``present`` record.

        The caller has already checked the session is active and unexpired.
        Raises ConflictError if the user already has a record for the
        session, whether found by the pre-check or by the unique constraint.
        """
        if AttendanceService.by_session_and_user(session_id, user_id):
            raise ConflictError(DUPLICATE_MESSAGE)

        record = AttendanceRecord(
            user_id=user_id,
            session_id=session_id,
            check_in_time=now or utcnow(),
            status=AttendanceStatus.PRESENT,
            user_name=name or '',
            method=method
        )
        db.session.add(record)
        commit(
            'mark_attendance',
            conflict_message=DUPLICATE_MESSAGE,
            session_id=session_id,
            user_id=user_id
        )

        current_app.logger.info(
            'Attendance marked: session=%s user=%s method=%s', session_id, user_id, method
        )
        return record

    @staticmethod
    def close_out_absentees(session_id: int, now: Optional[datetime] = None) -> List[AttendanceRecord]:
        """Mark every student without a record for the session as absent."""
        closed_at = now or utcnow()

        students = User.query.filter_by(role=UserRole.STUDENT).all()
        recorded = {
            record.user_id
            for record in AttendanceRecord.query.filter_by(session_id=session_id).all()
        }

        absentees = []
        for student in students:
            if student.id in recorded:
                continue
            record = AttendanceRecord(
                user_id=student.id,
                session_id=session_id,
                check_in_time=closed_at,
                status=AttendanceStatus.ABSENT,
                user_name=student.name or '',
                method='close_out'
            )
            db.session.add(record)
            absentees.append(record)

        if absentees:
            commit('close_out_absentees', session_id=session_id, absent=len(absentees))

        current_app.logger.info(
            'Close-out for session %s: %d students, %d marked absent',
            session_id, len(students), len(absentees)
        )
        return absentees

    @staticmethod
    def by_user(user_id: int) -> List[AttendanceRecord]:
        return AttendanceRecord.query.filter_by(user_id=user_id)\
            .order_by(AttendanceRecord.check_in_time.desc()).all()

    @staticmethod
    def by_session(session_id: int) -> List[AttendanceRecord]:
        return AttendanceRecord.query.filter_by(session_id=session_id)\
            .order_by(AttendanceRecord.check_in_time.asc()).all()

    @staticmethod
    def by_session_and_user(session_id: int, user_id: int) -> Optional[AttendanceRecord]:
        return AttendanceRecord.query.filter_by(session_id=session_id, user_id=user_id).first()

    @staticmethod
    def all_records() -> List[AttendanceRecord]:
        return AttendanceRecord.query.order_by(AttendanceRecord.check_in_time.desc()).all()

    @staticmethod
    def summarize_session(session_id: int) -> Dict[str, int]:
        """Count present and absent rows for a session."""
        records = AttendanceService.by_session(session_id)
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        return {
            'total': len(records),
            'present': present,
            'absent': len(records) - present
        }
