"""User model for authentication and authorization."""
from enum import Enum
from werkzeug.security import generate_password_hash, check_password_hash
from attendance_tracker import db
from attendance_tracker.models.base import BaseModel


class UserRole(Enum):
    """User roles enumeration."""
    ADMIN = 'admin'
    STUDENT = 'student'


class UserStatus(Enum):
    """Account status enumeration."""
    ACTIVE = 'active'
    DISABLED = 'disabled'


class User(BaseModel):
    """User model for all system users."""

    __tablename__ = 'users'

    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)

    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.STUDENT, index=True)
    status = db.Column(db.Enum(UserStatus), nullable=False, default=UserStatus.ACTIVE)

    def set_password(self, password: str) -> None:
        """Set user password with hashing."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check if provided password matches user's password."""
        return check_password_hash(self.password_hash, password)

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_enabled(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary excluding sensitive data."""
        exclude = (exclude or []) + ['password_hash']

        result = super().to_dict(exclude=exclude)
        result['role'] = self.role.value if self.role else None
        result['status'] = self.status.value if self.status else None

        return result

    def __repr__(self) -> str:
        return f'<User {self.username}>'
