"""Helper functions for the application."""
from datetime import datetime, timezone
from flask import jsonify
from typing import Any, Dict, List, Optional


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def handle_error(error, status_code: int, errors: Optional[List[Dict[str, str]]] = None):
    """Handle application errors with consistent format."""
    message = getattr(error, 'description', None) or getattr(error, 'message', None) or str(error)
    body = {
        'error': True,
        'message': message,
        'status_code': status_code
    }
    if errors:
        body['errors'] = errors
    return jsonify(body), status_code


def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    return jsonify(response), status_code


def error_response(message: str, status_code: int = 400):
    """Return consistent error response."""
    return jsonify({
        'error': True,
        'message': message,
        'status_code': status_code
    }), status_code
