"""Session lifecycle service.

Rules:
  * at most one session is active; creating a session deactivates the
    others in the same transaction that inserts the new row
  * expiry is lazy: every read path expires overdue active sessions
    through ``expire_session`` before handing rows back
  * ``expire_session`` runs the absentee close-out before clearing the flag
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from flask import current_app

from attendance_tracker import db
from attendance_tracker.models.attendance import AttendanceRecord
from attendance_tracker.models.attendance_session import AttendanceSession
from attendance_tracker.models.base import commit
from attendance_tracker.services.attendance_service import AttendanceService
from attendance_tracker.services.qr_service import QRService
from attendance_tracker.utils.helpers import utcnow

EDITABLE_FIELDS = ('name', 'date', 'time', 'duration', 'qr_code')


@dataclass
class ExpiryResult:
    session: AttendanceSession
    absent_records: List[AttendanceRecord] = field(default_factory=list)

    @property
    def absent_count(self) -> int:
        return len(self.absent_records)


class SessionService:
    """Service for the attendance session lifecycle."""

    @staticmethod
    def create_session(
        name: str,
        date: str,
        time: str,
        duration: int,
        qr_code: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> AttendanceSession:
        """Deactivate any active session and start a new one."""
        now = now or utcnow()

        active_ids = [
            row.id for row in
            db.session.query(AttendanceSession.id).filter_by(is_active=True).all()
        ]
        if active_ids:
            AttendanceSession.query.filter(AttendanceSession.id.in_(active_ids))\
                .update({'is_active': False}, synchronize_session='fetch')
            current_app.logger.info('Deactivating sessions %s before creating "%s"', active_ids, name)

        session = AttendanceSession(
            name=name,
            date=date,
            time=time,
            duration=duration,
            qr_code=qr_code or '',
            created_at=now,
            expires_at=AttendanceSession.compute_expiry(now, duration),
            is_active=True
        )
        db.session.add(session)

        if not qr_code:
            # Payload carries the row id, so the id has to exist first
            db.session.flush()
            session.qr_code = QRService.build_payload(session)

        commit('create_session', name=name, deactivated=active_ids)

        current_app.logger.info(
            'Session %s "%s" created, expires at %s', session.id, name, session.expires_at.isoformat()
        )
        return session

    @staticmethod
    def _apply_expiry(session: AttendanceSession, now: Optional[datetime] = None) -> AttendanceSession:
        """Expire the session if it is still flagged active past its deadline."""
        if session.is_active and session.is_expired(now):
            current_app.logger.info(
                'Session %s expired at %s, closing it', session.id, session.expires_at.isoformat()
            )
            SessionService.expire_session(session.id, now=now)
        return session

    @staticmethod
    def get_active_session(now: Optional[datetime] = None) -> Optional[AttendanceSession]:
        """Return the current active session, or None if there is none or it expired."""
        now = now or utcnow()
        candidates = AttendanceSession.query.filter_by(is_active=True)\
            .order_by(AttendanceSession.created_at.desc(), AttendanceSession.id.desc()).all()

        current = None
        for session in candidates:
            SessionService._apply_expiry(session, now)
            if session.is_active and current is None:
                current = session

        return current

    @staticmethod
    def get_session(session_id: int, now: Optional[datetime] = None) -> Optional[AttendanceSession]:
        """Return a session by id; an overdue session comes back already expired."""
        session = AttendanceSession.get_by_id(session_id)
        if session is None:
            return None
        return SessionService._apply_expiry(session, now)

    @staticmethod
    def list_sessions(now: Optional[datetime] = None) -> List[AttendanceSession]:
        sessions = AttendanceSession.query\
            .order_by(AttendanceSession.created_at.desc(), AttendanceSession.id.desc()).all()
        for session in sessions:
            SessionService._apply_expiry(session, now)
        return sessions

    @staticmethod
    def expire_session(session_id: int, now: Optional[datetime] = None) -> Optional[ExpiryResult]:
        """Close a session: back-fill absentees, then clear the active flag.

        Idempotent. Returns None when the session does not exist.
        """
        session = AttendanceSession.get_by_id(session_id)
        if session is None:
            current_app.logger.warning('Session %s not found for expiration', session_id)
            return None

        absentees = AttendanceService.close_out_absentees(session.id, now=now)

        if session.is_active:
            session.is_active = False
            commit('expire_session', session_id=session.id)
            current_app.logger.info('Session %s expired', session.id)

        return ExpiryResult(session=session, absent_records=absentees)

    @staticmethod
    def update_session(session_id: int, now: Optional[datetime] = None, **changes) -> Optional[AttendanceSession]:
        """Edit session metadata. A new duration moves the deadline.

        An overdue session is expired before the edit, so extending it does
        not reopen it.
        """
        session = SessionService.get_session(session_id, now=now)
        if session is None:
            return None

        generated_qr = session.qr_code == QRService.build_payload(session)

        for key, value in changes.items():
            if key in EDITABLE_FIELDS:
                setattr(session, key, value)

        if 'duration' in changes:
            session.expires_at = AttendanceSession.compute_expiry(session.created_at, session.duration)

        if generated_qr and 'qr_code' not in changes:
            session.qr_code = QRService.build_payload(session)

        session.updated_at = utcnow()
        commit('update_session', session_id=session_id)
        return session

    @staticmethod
    def delete_session(session_id: int) -> bool:
        session = AttendanceSession.get_by_id(session_id)
        if session is None:
            return False

        AttendanceRecord.query.filter_by(session_id=session_id).delete(synchronize_session=False)
        session.delete()
        current_app.logger.info('Session %s deleted', session_id)
        return True
