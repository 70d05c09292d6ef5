"""Authorization decorators.

A closed set of permission predicates applied per route:
``login_required``, ``admin_required`` and ``self_or_admin(param)``.
Each verifies the JWT first, so a missing or invalid token is a 401 and a
valid token lacking permission is a 403.
"""
from functools import wraps
from typing import Callable

from flask_jwt_extended import current_user, verify_jwt_in_request

from attendance_tracker.models.user import User
from attendance_tracker.utils.errors import AuthorizationError


def _require(predicate: Callable[[User, dict], bool], message: str):
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()

            if not predicate(current_user, kwargs):
                raise AuthorizationError(message)

            return f(*args, **kwargs)
        return decorated_function
    return decorator


login_required = _require(lambda user, kwargs: True, "Unauthorized")

admin_required = _require(lambda user, kwargs: user.is_admin(), "Admin access required")


def self_or_admin(param: str = 'user_id'):
    """Allow admins, or the user whose id is in the ``param`` URL argument."""
    return _require(
        lambda user, kwargs: user.is_admin() or user.id == kwargs.get(param),
        "Forbidden"
    )
