"""Application exceptions mapped to HTTP status codes."""
from typing import Dict, List, Optional


class AttendanceTrackerError(Exception):
    """Base exception for business rule violations."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AttendanceTrackerError):
    """Raised when a request payload is malformed."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: Optional[List[Dict[str, str]]] = None, message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors or []


class SessionClosedError(AttendanceTrackerError):
    """Raised when a check-in targets an inactive or expired session."""

    status_code = 400
    default_message = "Session is not active"


class AuthenticationError(AttendanceTrackerError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AttendanceTrackerError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AttendanceTrackerError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AttendanceTrackerError):
    status_code = 409
    default_message = "Conflict"


class PersistenceError(AttendanceTrackerError):
    """Raised when the database rejects a write."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, operation: str, message: Optional[str] = None, **context):
        super().__init__(message)
        self.operation = operation
        self.context = context
