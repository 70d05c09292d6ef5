"""Attendance record model."""
from enum import Enum

from attendance_tracker import db
from attendance_tracker.models.base import BaseModel
from attendance_tracker.utils.helpers import utcnow


class AttendanceStatus(Enum):
    PRESENT = 'present'
    ABSENT = 'absent'


class AttendanceRecord(BaseModel):
    """One (session, user) outcome. Immutable once written."""

    __tablename__ = 'attendance_records'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'user_id', name='uq_attendance_session_user'),
    )

    # Not a foreign key: records outlive a deleted user
    user_id = db.Column(db.Integer, nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    check_in_time = db.Column(db.DateTime, nullable=False, default=utcnow)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    user_name = db.Column(db.String(255), nullable=True)

    # qr, manual, close_out
    method = db.Column(db.String(20), nullable=False, default='qr')

    def to_dict(self, exclude: list = None) -> dict:
        result = super().to_dict(exclude=exclude)
        result['status'] = self.status.value if self.status else None
        return result

    def __repr__(self):
        return f'<AttendanceRecord {self.session_id}-{self.user_id} {self.status.value}>'
