from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence, Union

from ..common.datetime_utils import parse_iso_date, parse_time_of_day
from ..common.validators import optional_str, require_non_empty, require_present
from ..common.weekdays import parse_weekdays, resolve_schedule_date, resolve_weekday
from ..core.constants import DEFAULT_LESSON_DESC
from ..core.enums import LessonStatus, Weekday
from ..core.exceptions import InvalidTimeWindowError, NotFoundError, ValidationError
from .model import DaySchedule, Lesson, NewLesson
from .repository import LessonRepository

if TYPE_CHECKING:
    from ..attendance.service import AttendanceService

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset(
    {"teacher_id", "group_id", "weekdays", "start_time", "end_time", "room", "desc", "status"}
)


def _check_window(start: time, end: time) -> None:
    if start >= end:
        raise InvalidTimeWindowError(
            f"Start time {start.strftime('%H:%M')} must be before end time {end.strftime('%H:%M')}"
        )


def _parse_status(value: Union[str, LessonStatus, None]) -> LessonStatus:
    if value is None:
        return LessonStatus.SCHEDULED
    if isinstance(value, LessonStatus):
        return value
    needle = str(value).strip().lower()
    for status in LessonStatus:
        if status.value.lower() == needle or status.name.lower() == needle:
            return status
    raise ValidationError(f"Invalid lesson status: {value!r}")


class LessonService:
    """Use case: quản lý lesson lặp lại theo thứ trong tuần.

    Deleting a lesson asks the attendance reconciler to purge dependent
    records first; both steps run inside one ``atomic()`` block.
    """

    def __init__(self, lessons: LessonRepository, attendance: "AttendanceService"):
        self._lessons = lessons
        self._attendance = attendance

    def create_template(
        self,
        *,
        teacher_id: Optional[str],
        start_time: Union[str, time, None],
        end_time: Union[str, time, None],
        room: Optional[str],
        weekdays: Optional[Iterable[Union[str, Weekday]]] = None,
        group_id: Optional[str] = None,
        desc: Optional[str] = None,
        status: Union[str, LessonStatus, None] = None,
    ) -> Lesson:
        teacher_id = require_non_empty(teacher_id, "teacher_id")
        room = require_non_empty(room, "room")
        start = require_present(parse_time_of_day(start_time, "start_time"), "start_time")
        end = require_present(parse_time_of_day(end_time, "end_time"), "end_time")
        _check_window(start, end)

        new = NewLesson(
            teacher_id=teacher_id,
            weekdays=parse_weekdays(weekdays),
            start_time=start,
            end_time=end,
            room=room,
            group_id=optional_str(group_id),
            desc=optional_str(desc) or DEFAULT_LESSON_DESC,
            status=_parse_status(status),
        )
        lesson_id = self._lessons.create(new)
        logger.info("Created lesson %s (teacher=%s, room=%s)", lesson_id, new.teacher_id, new.room)
        return self.get_template(lesson_id)

    def update_template(self, lesson_id: int, **fields: Any) -> Lesson:
        """Apply only the supplied fields; a value of ``None`` means "leave unchanged"."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown lesson field(s): {', '.join(sorted(unknown))}")

        changes = {k: v for k, v in fields.items() if v is not None}

        with self._lessons.atomic():
            current = self._lessons.get_by_id(int(lesson_id), for_update=True)
            if not current:
                raise NotFoundError(f"Lesson {lesson_id} not found")

            updates: dict[str, Any] = {}
            if "teacher_id" in changes:
                updates["teacher_id"] = require_non_empty(changes["teacher_id"], "teacher_id")
            if "room" in changes:
                updates["room"] = require_non_empty(changes["room"], "room")
            if "group_id" in changes:
                updates["group_id"] = optional_str(changes["group_id"])
            if "weekdays" in changes:
                updates["weekdays"] = parse_weekdays(changes["weekdays"])
            if "desc" in changes:
                updates["desc"] = str(changes["desc"]).strip()
            if "status" in changes:
                updates["status"] = _parse_status(changes["status"])
            if "start_time" in changes:
                updates["start_time"] = require_present(
                    parse_time_of_day(changes["start_time"], "start_time"), "start_time"
                )
            if "end_time" in changes:
                updates["end_time"] = require_present(parse_time_of_day(changes["end_time"], "end_time"), "end_time")

            merged = replace(current, **updates)
            if "start_time" in updates or "end_time" in updates:
                _check_window(merged.start_time, merged.end_time)

            if not self._lessons.save(merged):
                raise NotFoundError(f"Lesson {lesson_id} not found")

        logger.info("Updated lesson %s (%s)", lesson_id, ", ".join(sorted(updates)) or "no changes")
        return self.get_template(int(lesson_id))

    def get_template(self, lesson_id: int) -> Lesson:
        lesson = self._lessons.get_by_id(int(lesson_id))
        if not lesson:
            raise NotFoundError(f"Lesson {lesson_id} not found")
        return lesson

    def list_templates(self) -> Sequence[Lesson]:
        return sorted(self._lessons.list_all(), key=lambda l: (l.start_time, l.lesson_id))

    def lessons_on_date(self, value: Union[str, date]) -> Sequence[Lesson]:
        weekday = resolve_weekday(value)
        lessons = [
            l for l in self._lessons.list_scheduled_for_weekday(weekday) if l.is_scheduled and l.occurs_on(weekday)
        ]
        return sorted(lessons, key=lambda l: (l.start_time, l.lesson_id))

    def schedule_for_date(self, value: Union[str, date]) -> DaySchedule:
        requested = parse_iso_date(value)
        return DaySchedule(
            requested_date=requested,
            resolved_date=resolve_schedule_date(requested),
            weekday=resolve_weekday(requested),
            lessons=tuple(self.lessons_on_date(requested)),
        )

    def delete_template(self, lesson_id: int) -> int:
        """Purge the lesson's attendance, then remove the lesson. Returns purged count."""
        with self._lessons.atomic():
            if not self._lessons.get_by_id(int(lesson_id), for_update=True):
                raise NotFoundError(f"Lesson {lesson_id} not found")

            purged = self._attendance.purge_for_template(int(lesson_id))
            if not self._lessons.delete(int(lesson_id)):
                raise NotFoundError(f"Lesson {lesson_id} not found")

        logger.info("Deleted lesson %s (purged %d attendance records)", lesson_id, purged)
        return purged
