from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.repository import LessonRepository
from .lessons.service import LessonService


@dataclass(frozen=True)
class Container:
    lessons_repo: LessonRepository
    attendance_repo: AttendanceRepository

    lesson_service: LessonService
    attendance_service: AttendanceService


def wire(*, lessons_repo: LessonRepository, attendance_repo: AttendanceRepository) -> Container:
    """Build services on top of any pair of repositories sharing one store."""
    attendance_service = AttendanceService(attendance_repo, lessons_repo)
    lesson_service = LessonService(lessons_repo, attendance_service)

    return Container(
        lessons_repo=lessons_repo,
        attendance_repo=attendance_repo,
        lesson_service=lesson_service,
        attendance_service=attendance_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        lessons_repo=MySQLLessonRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
