"""In-memory repositories used by the service and API tests.

Both repositories share one ``InMemoryStore`` so ``atomic()`` behaves like a
single database transaction: a re-entrant lock held for the whole block.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Optional

from src.edu_center.edu_center.attendance.model import AttendanceRecord, NewAttendance
from src.edu_center.edu_center.core.enums import Weekday
from src.edu_center.edu_center.lessons.model import Lesson, NewLesson


class InMemoryStore:
    def __init__(self):
        self.lock = threading.RLock()
        self.lessons: Dict[int, Lesson] = {}
        self.attendance: Dict[int, AttendanceRecord] = {}
        self._lesson_id = 0
        self._attendance_id = 0

    def next_lesson_id(self) -> int:
        self._lesson_id += 1
        return self._lesson_id

    def next_attendance_id(self) -> int:
        self._attendance_id += 1
        return self._attendance_id


class InMemoryLessons:
    def __init__(self, store: InMemoryStore):
        self._store = store

    @contextmanager
    def atomic(self):
        with self._store.lock:
            yield

    def get_by_id(self, lesson_id: int, *, for_update: bool = False) -> Optional[Lesson]:
        with self._store.lock:
            return self._store.lessons.get(int(lesson_id))

    def create(self, lesson: NewLesson) -> int:
        with self._store.lock:
            lesson_id = self._store.next_lesson_id()
            now = datetime(2024, 3, 1, 9, 0, 0)
            self._store.lessons[lesson_id] = Lesson(
                lesson_id=lesson_id,
                teacher_id=lesson.teacher_id,
                group_id=lesson.group_id,
                weekdays=lesson.weekdays,
                start_time=lesson.start_time,
                end_time=lesson.end_time,
                room=lesson.room,
                desc=lesson.desc,
                status=lesson.status,
                created_at=now,
                updated_at=now,
            )
            return lesson_id

    def save(self, lesson: Lesson) -> bool:
        with self._store.lock:
            if lesson.lesson_id not in self._store.lessons:
                return False
            self._store.lessons[lesson.lesson_id] = lesson
            return True

    def delete(self, lesson_id: int) -> bool:
        with self._store.lock:
            return self._store.lessons.pop(int(lesson_id), None) is not None

    def list_all(self):
        with self._store.lock:
            return list(self._store.lessons.values())

    def list_scheduled_for_weekday(self, weekday: Weekday):
        with self._store.lock:
            return [l for l in self._store.lessons.values() if l.is_scheduled and weekday in l.weekdays]


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._store.lock:
            return self._store.attendance.get(int(attendance_id))

    def insert_if_absent(self, record: NewAttendance) -> Optional[int]:
        with self._store.lock:
            student_id = record.subject.student_id
            if student_id is not None:
                for r in self._store.attendance.values():
                    if (r.lesson_id, r.student_id, r.attended_on) == (record.lesson_id, student_id, record.attended_on):
                        return None

            attendance_id = self._store.next_attendance_id()
            self._store.attendance[attendance_id] = AttendanceRecord(
                attendance_id=attendance_id,
                lesson_id=record.lesson_id,
                student_id=student_id,
                teacher_id=record.subject.teacher_id,
                attended_on=record.attended_on,
                desc=record.desc,
                created_at=record.created_at,
            )
            return attendance_id

    def update_desc(self, attendance_id: int, desc: str) -> bool:
        with self._store.lock:
            current = self._store.attendance.get(int(attendance_id))
            if not current:
                return False
            self._store.attendance[int(attendance_id)] = replace(current, desc=desc)
            return True

    def delete(self, attendance_id: int) -> bool:
        with self._store.lock:
            return self._store.attendance.pop(int(attendance_id), None) is not None

    def delete_for_lesson(self, lesson_id: int) -> int:
        with self._store.lock:
            ids = [k for k, r in self._store.attendance.items() if r.lesson_id == int(lesson_id)]
            for k in ids:
                del self._store.attendance[k]
            return len(ids)

    def list_for_date(self, attended_on: date):
        with self._store.lock:
            items = [r for r in self._store.attendance.values() if r.attended_on == attended_on]
        items.sort(key=lambda r: (r.created_at, r.attendance_id), reverse=True)
        return items

    def list_for_lesson(self, lesson_id: int):
        with self._store.lock:
            items = [r for r in self._store.attendance.values() if r.lesson_id == int(lesson_id)]
        items.sort(key=lambda r: (r.attended_on, r.created_at, r.attendance_id), reverse=True)
        return items


class FakeCursor:
    """DB-API cursor stand-in: ``execute`` raises ``error`` when one is set."""

    def __init__(self, error: Optional[Exception] = None, lastrowid: int = 0, rowcount: int = 0):
        self.error = error
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary: bool = False):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    """Stands in for ``DatabaseConnection``; counts how often a connection is opened."""

    def __init__(self, cursor: Optional[FakeCursor] = None, connect_error: Optional[Exception] = None):
        self.cursor = cursor or FakeCursor()
        self.connect_error = connect_error
        self.connections = []

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self.cursor)
        self.connections.append(conn)
        return conn
