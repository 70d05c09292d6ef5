"""Attendance session: one timed, QR-scannable check-in window."""
from datetime import datetime, timedelta
from typing import Optional

from attendance_tracker import db
from attendance_tracker.models.base import BaseModel
from attendance_tracker.utils.helpers import utcnow


class AttendanceSession(BaseModel):
    """Session for tracking attendance with QR codes.

    At most one row is expected to have ``is_active`` set. The flag only
    ever moves from true to false.
    """

    __tablename__ = 'attendance_sessions'

    name = db.Column(db.String(255), nullable=False)
    date = db.Column(db.String(10), nullable=False)
    time = db.Column(db.String(16), nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # minutes
    qr_code = db.Column(db.Text, nullable=False, default='')
    expires_at = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=False, index=True)

    @staticmethod
    def compute_expiry(start: datetime, duration: int) -> datetime:
        return start + timedelta(minutes=duration)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if session is past its deadline."""
        return (now or utcnow()) > self.expires_at

    def __repr__(self) -> str:
        return f'<AttendanceSession {self.id} {self.name}>'
