from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_if_absent(self, record: NewAttendance) -> Optional[int]:
        """Atomic check-and-insert keyed on (lesson_id, student_id, attended_on).

        Returns the new id, or ``None`` when a student record for the same key
        already exists. Teacher records are always inserted.
        """

        raise NotImplementedError

    def update_desc(self, attendance_id: int, desc: str) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def delete_for_lesson(self, lesson_id: int) -> int:
        """Remove every record of a lesson; returns how many were removed."""

        raise NotImplementedError

    def list_for_date(self, attended_on: date) -> Sequence[AttendanceRecord]:
        """Most recently created first."""

        raise NotImplementedError

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
