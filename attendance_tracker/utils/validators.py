"""Validation utilities for the application."""
import re
from typing import Any, Dict, List, Optional, Tuple

from werkzeug.routing import IntegerConverter

from attendance_tracker.utils.errors import ValidationError

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'

# Largest id the database INTEGER column holds
MAX_ID = 2**31 - 1

_MISSING = object()


class Field:
    """A typed field constraint used by Schema."""

    def __init__(self, kind: type, required: bool = True, default: Any = _MISSING,
                 min_value: Optional[int] = None, max_value: Optional[int] = None,
                 min_length: Optional[int] = None, max_length: Optional[int] = None,
                 pattern: Optional[str] = None, pattern_message: Optional[str] = None,
                 choices: Optional[Tuple[str, ...]] = None, strip: bool = True):
        self.kind = kind
        self.required = required
        self.default = default
        self.min_value = min_value
        self.max_value = max_value
        self.min_length = min_length
        self.max_length = max_length
        self.pattern = pattern
        self.pattern_message = pattern_message
        self.choices = choices
        self.strip = strip

    def _type_ok(self, value: Any) -> bool:
        # bool is a subclass of int; never accept it where a number is expected
        if self.kind is int:
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, self.kind)

    def clean(self, value: Any) -> Tuple[Any, Optional[str]]:
        """Return (cleaned_value, error_message)."""
        if not self._type_ok(value):
            return None, f"Must be of type {self.kind.__name__}"

        if self.kind is str:
            if self.strip:
                value = value.strip()
            if self.min_length is not None and len(value) < self.min_length:
                if self.min_length == 1:
                    return None, "Must not be empty"
                return None, f"Must be at least {self.min_length} characters long"
            if self.max_length is not None and len(value) > self.max_length:
                return None, f"Must be at most {self.max_length} characters long"
            if self.pattern and not re.match(self.pattern, value):
                return None, self.pattern_message or "Invalid format"
            if self.choices and value not in self.choices:
                return None, f"Must be one of: {', '.join(self.choices)}"

        if self.kind is int:
            if self.min_value is not None and value < self.min_value:
                return None, f"Must be at least {self.min_value}"
            if self.max_value is not None and value > self.max_value:
                return None, f"Must be at most {self.max_value}"

        return value, None


class Schema:
    """Declarative request payload schema.

    Subclasses declare ``fields``. ``load`` returns the cleaned payload
    (unknown keys dropped) or raises ValidationError listing every violated
    field. With ``partial=True`` required fields may be omitted.
    """

    fields: Dict[str, Field] = {}

    @classmethod
    def load(cls, data: Any, partial: bool = False) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ValidationError(
                [{'field': '_body', 'message': 'Request body must be a JSON object'}]
            )

        cleaned: Dict[str, Any] = {}
        errors: List[Dict[str, str]] = []

        for name, field in cls.fields.items():
            value = data.get(name, _MISSING)

            if value is _MISSING or value is None:
                if field.default is not _MISSING and not partial:
                    cleaned[name] = field.default
                elif field.required and not partial:
                    errors.append({'field': name, 'message': 'This field is required'})
                continue

            value, error = field.clean(value)
            if error:
                errors.append({'field': name, 'message': error})
            else:
                cleaned[name] = value

        if errors:
            raise ValidationError(errors)

        return cleaned


class LoginSchema(Schema):
    fields = {
        'username': Field(str, min_length=1),
        'password': Field(str, min_length=1, strip=False),
    }


class UserCreateSchema(Schema):
    fields = {
        'username': Field(str, min_length=1, max_length=64),
        'password': Field(str, min_length=6, max_length=128, strip=False),
        'name': Field(str, min_length=1, max_length=255),
        'email': Field(str, pattern=EMAIL_PATTERN, pattern_message='Invalid email address'),
        'role': Field(str, default='student', choices=('admin', 'student')),
        'status': Field(str, default='active', choices=('active', 'disabled')),
    }


class UserUpdateSchema(Schema):
    fields = {
        'username': Field(str, required=False, min_length=1, max_length=64),
        'password': Field(str, required=False, min_length=6, max_length=128, strip=False),
        'name': Field(str, required=False, min_length=1, max_length=255),
        'email': Field(str, required=False, pattern=EMAIL_PATTERN, pattern_message='Invalid email address'),
        'role': Field(str, required=False, choices=('admin', 'student')),
        'status': Field(str, required=False, choices=('active', 'disabled')),
    }


class SessionCreateSchema(Schema):
    fields = {
        'name': Field(str, min_length=1, max_length=255),
        'date': Field(str, pattern=DATE_PATTERN, pattern_message='Date must be in YYYY-MM-DD format'),
        'time': Field(str, min_length=1, max_length=16),
        'duration': Field(int, min_value=1, max_value=180),
        'qrCode': Field(str, required=False, strip=False),
    }


class SessionUpdateSchema(SessionCreateSchema):
    pass


class AttendanceMarkSchema(Schema):
    fields = {
        'sessionId': Field(int, min_value=1, max_value=MAX_ID),
        'manual': Field(bool, default=False),
        'userId': Field(int, required=False, min_value=1, max_value=MAX_ID),
    }


class IdConverter(IntegerConverter):
    """``<id:...>`` URL segment: a positive integer that fits an id column.

    Anything outside the range fails to match and the route 404s.
    """

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault('min', 1)
        kwargs.setdefault('max', MAX_ID)
        super().__init__(map, *args, **kwargs)
