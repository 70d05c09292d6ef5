"""Attendance recorder tests."""
from datetime import datetime

import pytest

from attendance_tracker.models.attendance import AttendanceStatus
from attendance_tracker.services.attendance_service import AttendanceService
from attendance_tracker.services.session_service import SessionService
from attendance_tracker.services.user_service import UserService
from attendance_tracker.utils.errors import ConflictError


@pytest.fixture
def session(app):
    return SessionService.create_session(name='Physics', date='2026-03-02', time='10:00', duration=60)


def test_mark_attendance_creates_present_record(session, students):
    record = AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    assert record.id is not None
    assert record.status == AttendanceStatus.PRESENT
    assert record.user_name == 'Student 1'
    assert record.method == 'qr'
    assert AttendanceService.by_session_and_user(session.id, students[0].id).id == record.id


def test_second_mark_is_conflict(session, students):
    AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    with pytest.raises(ConflictError):
        AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    assert len(AttendanceService.by_session(session.id)) == 1


def test_unique_constraint_catches_missed_precheck(session, students, monkeypatch):
    AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    # simulate a concurrent request that passed the existence check
    monkeypatch.setattr(AttendanceService, 'by_session_and_user', staticmethod(lambda s, u: None))

    with pytest.raises(ConflictError):
        AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    monkeypatch.undo()
    assert len(AttendanceService.by_session(session.id)) == 1


def test_close_out_gives_every_student_one_row(session, students, admin):
    AttendanceService.mark_attendance(students[1].id, session.id, students[1].name)
    closed_at = datetime(2026, 3, 2, 11, 0, 0)

    absentees = AttendanceService.close_out_absentees(session.id, now=closed_at)

    assert sorted(r.user_id for r in absentees) == sorted([students[0].id, students[2].id])
    assert all(r.check_in_time == closed_at for r in absentees)
    assert all(r.method == 'close_out' for r in absentees)

    records = AttendanceService.by_session(session.id)
    by_user = {}
    for record in records:
        by_user.setdefault(record.user_id, []).append(record)

    # admins are not enrolled
    assert admin.id not in by_user
    assert sorted(by_user) == sorted(s.id for s in students)
    assert all(len(rows) == 1 for rows in by_user.values())
    assert by_user[students[1].id][0].status == AttendanceStatus.PRESENT


def test_close_out_without_students(session):
    assert AttendanceService.close_out_absentees(session.id) == []


def test_by_user_and_summary(session, students):
    AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)
    AttendanceService.close_out_absentees(session.id)

    assert [r.session_id for r in AttendanceService.by_user(students[0].id)] == [session.id]
    assert AttendanceService.summarize_session(session.id) == {'total': 3, 'present': 1, 'absent': 2}
    assert len(AttendanceService.all_records()) == 3


def test_records_survive_user_deletion(session, students):
    AttendanceService.mark_attendance(students[0].id, session.id, students[0].name)

    UserService.delete_user(students[0].id)

    records = AttendanceService.by_session(session.id)
    assert len(records) == 1
    assert records[0].user_name == 'Student 1'
