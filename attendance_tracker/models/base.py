"""Base model class with common functionality."""
from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from attendance_tracker import db
from attendance_tracker.utils.errors import ConflictError, PersistenceError
from attendance_tracker.utils.helpers import utcnow


def commit(operation: str, conflict_message: Optional[str] = None, **context) -> None:
    """Commit the current unit of work.

    Any database failure rolls back and is logged with the operation name and
    context ids before being raised as PersistenceError. When
    ``conflict_message`` is given, an IntegrityError is reported as a
    ConflictError instead.
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if conflict_message:
            current_app.logger.warning('%s conflict %s: %s', operation, context, e.orig)
            raise ConflictError(conflict_message) from e
        current_app.logger.error('%s failed %s: %s', operation, context, e)
        raise PersistenceError(operation, **context) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error('%s failed %s: %s', operation, context, e)
        raise PersistenceError(operation, **context) from e


class BaseModel(db.Model):
    """Base model class with common fields and methods."""

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def delete(self) -> None:
        """Delete instance from database."""
        db.session.delete(self)
        commit(f'delete_{self.__tablename__}', id=self.id)

    def to_dict(self, exclude: list = None) -> Dict[str, Any]:
        """Convert instance to dictionary."""
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            key = column.name
            if key not in exclude:
                value = getattr(self, key)
                if isinstance(value, datetime):
                    value = value.isoformat()
                result[key] = value

        return result

    @classmethod
    def get_by_id(cls, id: int) -> Optional['BaseModel']:
        """Get instance by ID."""
        return db.session.get(cls, id)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'
