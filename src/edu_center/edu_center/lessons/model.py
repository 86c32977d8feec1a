from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LESSON_DESC
from ..core.enums import LessonStatus, Weekday


@dataclass(frozen=True)
class Lesson:
    """Thực thể miền (domain): Buổi học lặp lại hằng tuần (lesson template).

    Lưu ý: Không sinh bản ghi cho từng ngày; một lesson "xảy ra" vào mọi ngày
    có thứ nằm trong ``weekdays``.
    """

    lesson_id: int
    teacher_id: str
    weekdays: frozenset[Weekday]
    start_time: time
    end_time: time
    room: str
    group_id: Optional[str] = None
    desc: str = DEFAULT_LESSON_DESC
    status: LessonStatus = LessonStatus.SCHEDULED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def occurs_on(self, weekday: Weekday) -> bool:
        # An empty weekday set matches nothing.
        return weekday in self.weekdays

    @property
    def is_scheduled(self) -> bool:
        return self.status == LessonStatus.SCHEDULED


@dataclass(frozen=True)
class NewLesson:
    """Validated input for creating a lesson (no id yet)."""

    teacher_id: str
    weekdays: frozenset[Weekday]
    start_time: time
    end_time: time
    room: str
    group_id: Optional[str] = None
    desc: str = DEFAULT_LESSON_DESC
    status: LessonStatus = LessonStatus.SCHEDULED


@dataclass(frozen=True)
class DaySchedule:
    """Read-model: lessons that run on the resolved date."""

    requested_date: date
    resolved_date: date
    weekday: Weekday
    lessons: Sequence[Lesson] = field(default_factory=tuple)
