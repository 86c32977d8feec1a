from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, lesson_id, student_id, teacher_id, attended_on, `desc`, created_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        lesson_id=int(r["lesson_id"]),
        student_id=r.get("student_id"),
        teacher_id=r.get("teacher_id"),
        attended_on=r["attended_on"],
        desc=r["desc"],
        created_at=r["created_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert_if_absent(self, record: NewAttendance) -> Optional[int]:
        # Uniqueness comes from uq_attendances_student; teacher rows have NULL student_id.
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendances(lesson_id, student_id, teacher_id, attended_on, `desc`, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.lesson_id),
                        record.subject.student_id,
                        record.subject.teacher_id,
                        record.attended_on,
                        record.desc,
                        record.created_at,
                    ),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    return None
                raise
            return int(cur.lastrowid)

    def update_desc(self, attendance_id: int, desc: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendances SET `desc`=%s WHERE attendance_id=%s", (desc, int(attendance_id)))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            return fetchone(cur) is not None

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def delete_for_lesson(self, lesson_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendances WHERE lesson_id=%s", (int(lesson_id),))
            return int(cur.rowcount or 0)

    def list_for_date(self, attended_on: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE attended_on=%s
                ORDER BY created_at DESC, attendance_id DESC
                """,
                (attended_on,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendances
                WHERE lesson_id=%s
                ORDER BY attended_on DESC, created_at DESC, attendance_id DESC
                """,
                (int(lesson_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]
