from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò người dùng dùng cho phân quyền."""

    ADMIN = "admin"
    TEACHER = "teacher"


class Weekday(str, Enum):
    """Ngày học trong tuần. Chủ nhật không có buổi học nên không nằm trong enum."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"


class LessonStatus(str, Enum):
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class SubjectKind(str, Enum):
    """Đối tượng được điểm danh: học viên hoặc giáo viên."""

    STUDENT = "student"
    TEACHER = "teacher"
