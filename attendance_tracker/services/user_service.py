"""User management service."""
from typing import List, Optional

from flask import current_app

from attendance_tracker import db
from attendance_tracker.models.base import commit
from attendance_tracker.models.user import User, UserRole, UserStatus
from attendance_tracker.utils.errors import ConflictError

DUPLICATE_USERNAME = "Username already exists"


class UserService:
    """Service for managing users."""

    @staticmethod
    def get_user(user_id: int) -> Optional[User]:
        return User.get_by_id(user_id)

    @staticmethod
    def get_by_username(username: str) -> Optional[User]:
        return User.query.filter_by(username=username).first()

    @staticmethod
    def list_users() -> List[User]:
        return User.query.order_by(User.id).all()

    @staticmethod
    def list_by_role(role: UserRole) -> List[User]:
        return User.query.filter_by(role=role).order_by(User.id).all()

    @staticmethod
    def create_user(
        username: str,
        password: str,
        name: str,
        email: str,
        role: str = 'student',
        status: str = 'active'
    ) -> User:
        """Create a user. Raises ConflictError on a taken username."""
        if UserService.get_by_username(username):
            raise ConflictError(DUPLICATE_USERNAME)

        user = User(
            username=username,
            name=name,
            email=email,
            role=UserRole(role),
            status=UserStatus(status)
        )
        user.set_password(password)
        db.session.add(user)
        commit('create_user', conflict_message=DUPLICATE_USERNAME, username=username)

        current_app.logger.info('User %s (%s) created as %s', user.id, username, role)
        return user

    @staticmethod
    def update_user(user_id: int, **changes) -> Optional[User]:
        """Apply profile, role, status or password changes."""
        user = User.get_by_id(user_id)
        if user is None:
            return None

        username = changes.get('username')
        if username and username != user.username and UserService.get_by_username(username):
            raise ConflictError(DUPLICATE_USERNAME)

        for key in ('username', 'name', 'email'):
            if key in changes:
                setattr(user, key, changes[key])
        if 'role' in changes:
            user.role = UserRole(changes['role'])
        if 'status' in changes:
            user.status = UserStatus(changes['status'])
        if changes.get('password'):
            user.set_password(changes['password'])

        commit('update_user', conflict_message=DUPLICATE_USERNAME, user_id=user_id)
        return user

    @staticmethod
    def delete_user(user_id: int) -> bool:
        user = User.get_by_id(user_id)
        if user is None:
            return False

        user.delete()
        current_app.logger.info('User %s deleted', user_id)
        return True
