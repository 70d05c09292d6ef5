"""Authentication API."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import current_user, set_access_cookies, unset_jwt_cookies

from attendance_tracker import limiter
from attendance_tracker.services.auth_service import AuthService
from attendance_tracker.utils.decorators import login_required
from attendance_tracker.utils.errors import AuthenticationError
from attendance_tracker.utils.helpers import success_response
from attendance_tracker.utils.validators import LoginSchema

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(lambda: current_app.config['LOGIN_RATE_LIMIT'])
def login():
    """Log in with username and password."""
    data = LoginSchema.load(request.get_json(silent=True))

    user, error = AuthService.authenticate(data['username'], data['password'])
    if error:
        current_app.logger.info('Failed login for %s: %s', data['username'], error)
        raise AuthenticationError(error)

    access_token = AuthService.issue_token(user)
    response, status = success_response(
        data=AuthService.login_payload(user, access_token),
        message="Login successful"
    )
    set_access_cookies(response, access_token)
    return response, status


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Clear the auth cookies."""
    response, status = success_response(message="Logged out successfully")
    unset_jwt_cookies(response)
    return response, status


@auth_bp.route("/me", methods=["GET"])
@login_required
def get_current_user():
    """Get current user profile."""
    return success_response(data=current_user.to_dict())
