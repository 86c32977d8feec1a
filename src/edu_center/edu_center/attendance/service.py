from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_str, require_non_empty
from ..common.weekdays import resolve_weekday
from ..core.constants import DEFAULT_ATTENDANCE_DESC
from ..core.exceptions import (
    DayMismatchError,
    DuplicateAttendanceError,
    MismatchedLessonError,
    MissingFieldError,
    NotFoundError,
)
from ..lessons.repository import LessonRepository
from .model import AttendanceRecord, NewAttendance, SubjectRef
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: ghi nhận điểm danh cho một buổi học cụ thể của lesson."""

    def __init__(self, attendance: AttendanceRepository, lessons: LessonRepository):
        self._attendance = attendance
        self._lessons = lessons

    def record_attendance(
        self,
        *,
        lesson_id: int,
        attended_on: Union[str, date],
        student_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        desc: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()

        # Lesson row stays locked until commit; delete_template takes the same lock.
        with self._lessons.atomic():
            lesson = self._lessons.get_by_id(int(lesson_id), for_update=True)
            if not lesson:
                raise NotFoundError(f"Lesson {lesson_id} not found")

            subject = SubjectRef.from_ids(student_id, teacher_id)

            if optional_str(attended_on) is None:
                raise MissingFieldError("date")
            day = parse_iso_date(attended_on)
            weekday = resolve_weekday(day)
            if not lesson.occurs_on(weekday):
                raise DayMismatchError(
                    f"Lesson {lesson.lesson_id} does not run on {weekday.value} ({day.isoformat()})"
                )

            new = NewAttendance(
                lesson_id=lesson.lesson_id,
                subject=subject,
                attended_on=day,
                created_at=now,
                desc=optional_str(desc) or DEFAULT_ATTENDANCE_DESC,
            )
            attendance_id = self._attendance.insert_if_absent(new)
            if attendance_id is None:
                logger.info(
                    "Rejected duplicate attendance (lesson=%s, student=%s, date=%s)",
                    lesson.lesson_id,
                    subject.subject_id,
                    day,
                )
                raise DuplicateAttendanceError("Attendance already recorded for this student")

        logger.info(
            "Recorded attendance %s (lesson=%s, %s=%s, date=%s)",
            attendance_id,
            lesson.lesson_id,
            subject.kind.value,
            subject.subject_id,
            day,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            lesson_id=new.lesson_id,
            attended_on=new.attended_on,
            created_at=new.created_at,
            student_id=subject.student_id,
            teacher_id=subject.teacher_id,
            desc=new.desc,
        )

    def get_attendance(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError(f"Attendance {attendance_id} not found")
        return record

    def update_description(self, attendance_id: int, desc: Optional[str]) -> AttendanceRecord:
        """Only the description of a record may change after creation."""
        desc = require_non_empty(desc, "desc")
        if not self._attendance.update_desc(int(attendance_id), desc):
            raise NotFoundError(f"Attendance {attendance_id} not found")
        return self.get_attendance(int(attendance_id))

    def delete_attendance(self, lesson_id: int, attendance_id: int) -> None:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError(f"Attendance {attendance_id} not found")
        if record.lesson_id != int(lesson_id):
            raise MismatchedLessonError(f"Attendance {attendance_id} does not belong to lesson {lesson_id}")
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError(f"Attendance {attendance_id} not found")
        logger.info("Deleted attendance %s (lesson=%s)", attendance_id, lesson_id)

    def purge_for_template(self, lesson_id: int) -> int:
        """Remove all attendance of a lesson. Purging an empty lesson is a no-op."""
        with self._lessons.atomic():
            removed = self._attendance.delete_for_lesson(int(lesson_id))
        if removed:
            logger.info("Purged %d attendance records of lesson %s", removed, lesson_id)
        return removed

    def list_for_date(self, value: Union[str, date]) -> Sequence[AttendanceRecord]:
        day = parse_iso_date(value)
        records = self._attendance.list_for_date(day)
        return sorted(
            (r for r in records if r.attended_on == day),
            key=lambda r: (r.created_at, r.attendance_id),
            reverse=True,
        )

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        if not self._lessons.get_by_id(int(lesson_id)):
            raise NotFoundError(f"Lesson {lesson_id} not found")
        return self._attendance.list_for_lesson(int(lesson_id))
