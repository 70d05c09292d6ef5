"""User Management API - Admin Only."""
from flask import Blueprint, request

from attendance_tracker.models.user import UserRole
from attendance_tracker.services.user_service import UserService
from attendance_tracker.utils.decorators import admin_required, self_or_admin
from attendance_tracker.utils.errors import NotFoundError
from attendance_tracker.utils.helpers import success_response
from attendance_tracker.utils.validators import UserCreateSchema, UserUpdateSchema

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['GET'])
@admin_required
def get_users():
    """List all users."""
    users = UserService.list_users()
    return success_response(data=[user.to_dict() for user in users])


@users_bp.route('/students', methods=['GET'])
@admin_required
def get_students():
    """List all students."""
    students = UserService.list_by_role(UserRole.STUDENT)
    return success_response(data=[student.to_dict() for student in students])


@users_bp.route('/<id:user_id>', methods=['GET'])
@self_or_admin('user_id')
def get_user(user_id):
    user = UserService.get_user(user_id)
    if not user:
        raise NotFoundError("User not found")
    return success_response(data=user.to_dict())


@users_bp.route('', methods=['POST'])
@admin_required
def create_user():
    """Create a user."""
    data = UserCreateSchema.load(request.get_json(silent=True))
    user = UserService.create_user(**data)
    return success_response(data=user.to_dict(), message="User created successfully", status_code=201)


@users_bp.route('/<id:user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    """Update profile, role, status or password."""
    data = UserUpdateSchema.load(request.get_json(silent=True), partial=True)
    user = UserService.update_user(user_id, **data)
    if not user:
        raise NotFoundError("User not found")
    return success_response(data=user.to_dict(), message="User updated successfully")


@users_bp.route('/<id:user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    if not UserService.delete_user(user_id):
        raise NotFoundError("User not found")
    return '', 204
