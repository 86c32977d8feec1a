from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.validators import optional_str
from ..core.constants import DEFAULT_ATTENDANCE_DESC
from ..core.enums import SubjectKind
from ..core.exceptions import InvalidSubjectError


@dataclass(frozen=True)
class SubjectRef:
    """Người được điểm danh: đúng một trong hai (học viên hoặc giáo viên)."""

    kind: SubjectKind
    subject_id: str

    @classmethod
    def from_ids(cls, student_id: Optional[str], teacher_id: Optional[str]) -> "SubjectRef":
        student_id = optional_str(student_id)
        teacher_id = optional_str(teacher_id)
        if student_id and teacher_id:
            raise InvalidSubjectError("Attendance must name either a student or a teacher, not both")
        if student_id:
            return cls(SubjectKind.STUDENT, student_id)
        if teacher_id:
            return cls(SubjectKind.TEACHER, teacher_id)
        raise InvalidSubjectError("Either student_id or teacher_id is required")

    @property
    def student_id(self) -> Optional[str]:
        return self.subject_id if self.kind == SubjectKind.STUDENT else None

    @property
    def teacher_id(self) -> Optional[str]:
        return self.subject_id if self.kind == SubjectKind.TEACHER else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh cho một buổi cụ thể của lesson."""

    attendance_id: int
    lesson_id: int
    attended_on: date
    created_at: datetime
    student_id: Optional[str] = None
    teacher_id: Optional[str] = None
    desc: str = DEFAULT_ATTENDANCE_DESC

    @property
    def subject(self) -> SubjectRef:
        return SubjectRef.from_ids(self.student_id, self.teacher_id)


@dataclass(frozen=True)
class NewAttendance:
    lesson_id: int
    subject: SubjectRef
    attended_on: date
    created_at: datetime
    desc: str = DEFAULT_ATTENDANCE_DESC
