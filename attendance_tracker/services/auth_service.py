"""Authentication service."""
from typing import Optional, Tuple

from flask_jwt_extended import create_access_token

from attendance_tracker.models.user import User
from attendance_tracker.services.user_service import UserService


class AuthService:
    @staticmethod
    def authenticate(username: str, password: str) -> Tuple[Optional[User], Optional[str]]:
        """Check credentials. Returns (user, error_message)."""
        user = UserService.get_by_username(username.strip())

        if not user:
            return None, "Invalid username or password"

        if not user.check_password(password):
            return None, "Invalid username or password"

        if not user.is_enabled():
            return None, "Account is disabled"

        return user, None

    @staticmethod
    def issue_token(user: User) -> str:
        """Create an access token whose identity is the user id."""
        return create_access_token(
            identity=str(user.id),
            additional_claims={'role': user.role.value}
        )

    @staticmethod
    def login_payload(user: User, access_token: str) -> dict:
        return {
            'id': user.id,
            'username': user.username,
            'role': user.role.value,
            'name': user.name,
            'access_token': access_token
        }
