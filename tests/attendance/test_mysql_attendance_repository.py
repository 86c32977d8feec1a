from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest

from src.edu_center.edu_center.attendance.model import NewAttendance, SubjectRef
from src.edu_center.edu_center.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.edu_center.edu_center.core.exceptions import StorageError
from tests.fakes import FakeConnectionFactory, FakeCursor


def _new(student_id="s-1", teacher_id=None) -> NewAttendance:
    return NewAttendance(
        lesson_id=1,
        subject=SubjectRef.from_ids(student_id, teacher_id),
        attended_on=date(2024, 3, 5),
        created_at=datetime(2024, 3, 5, 10, 15),
        desc="Present",
    )


def test_insert_returns_new_id():
    factory = FakeConnectionFactory(FakeCursor(lastrowid=42))
    repo = MySQLAttendanceRepository(factory)

    assert repo.insert_if_absent(_new(student_id=None, teacher_id="t-1")) == 42

    sql, params = factory.cursor.executed[0]
    assert "INSERT INTO attendances" in sql
    assert params[1:3] == (None, "t-1")
    assert factory.connections[0].commits == 1


def test_duplicate_key_means_not_inserted():
    duplicate = mysql.connector.IntegrityError(msg="Duplicate entry for key 'uq_attendances_student'", errno=1062)
    factory = FakeConnectionFactory(FakeCursor(error=duplicate))
    repo = MySQLAttendanceRepository(factory)

    assert repo.insert_if_absent(_new()) is None

    conn = factory.connections[0]
    assert (conn.commits, conn.rollbacks) == (1, 0)


def test_other_integrity_errors_are_storage_errors():
    fk = mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=1452)
    factory = FakeConnectionFactory(FakeCursor(error=fk))
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(StorageError):
        repo.insert_if_absent(_new())

    assert factory.connections[0].rollbacks == 1


def test_delete_for_lesson_returns_rowcount():
    factory = FakeConnectionFactory(FakeCursor(rowcount=3))
    repo = MySQLAttendanceRepository(factory)

    assert repo.delete_for_lesson(1) == 3
    assert factory.cursor.executed[0][1] == (1,)
