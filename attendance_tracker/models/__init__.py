"""Models package with all models."""
from .base import BaseModel, commit
from .user import User, UserRole, UserStatus
from .attendance_session import AttendanceSession
from .attendance import AttendanceRecord, AttendanceStatus

__all__ = [
    'BaseModel', 'commit',
    'User', 'UserRole', 'UserStatus',
    'AttendanceSession',
    'AttendanceRecord', 'AttendanceStatus'
]
