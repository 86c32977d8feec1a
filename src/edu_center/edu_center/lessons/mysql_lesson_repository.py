from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Sequence

from ..core.enums import LessonStatus, Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, transaction
from .model import Lesson, NewLesson
from .repository import LessonRepository

_LESSON_COLUMNS = """
    l.lesson_id, l.teacher_id, l.group_id, l.start_time, l.end_time,
    l.room, l.`desc`, l.status, l.created_at, l.updated_at
"""


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction(self._conn_factory):
            yield

    @staticmethod
    def _to_lesson(r: dict, weekdays: frozenset[Weekday]) -> Lesson:
        return Lesson(
            lesson_id=int(r["lesson_id"]),
            teacher_id=str(r["teacher_id"]),
            group_id=r.get("group_id"),
            weekdays=weekdays,
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
            room=r["room"],
            desc=r.get("desc") or "",
            status=LessonStatus(r["status"]),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    def _load_weekdays(self, cur, lesson_ids: List[int]) -> Dict[int, frozenset[Weekday]]:
        if not lesson_ids:
            return {}
        placeholders = ",".join(["%s"] * len(lesson_ids))
        cur.execute(
            f"SELECT lesson_id, weekday FROM lesson_weekdays WHERE lesson_id IN ({placeholders})",
            tuple(lesson_ids),
        )
        out: Dict[int, set] = {lid: set() for lid in lesson_ids}
        for r in fetchall(cur):
            out[int(r["lesson_id"])].add(Weekday(r["weekday"]))
        return {lid: frozenset(days) for lid, days in out.items()}

    def _write_weekdays(self, cur, lesson_id: int, weekdays: frozenset[Weekday]) -> None:
        cur.execute("DELETE FROM lesson_weekdays WHERE lesson_id=%s", (int(lesson_id),))
        if weekdays:
            cur.executemany(
                "INSERT INTO lesson_weekdays(lesson_id, weekday) VALUES(%s,%s)",
                [(int(lesson_id), day.value) for day in weekdays],
            )

    def _select(self, cur, where: str = "", params: tuple = (), *, suffix: str = "") -> List[Lesson]:
        cur.execute(
            f"""
            SELECT {_LESSON_COLUMNS}
            FROM lessons l
            {where}
            ORDER BY l.start_time ASC, l.lesson_id ASC
            {suffix}
            """,
            params,
        )
        rows = fetchall(cur)
        days = self._load_weekdays(cur, [int(r["lesson_id"]) for r in rows])
        return [self._to_lesson(r, days.get(int(r["lesson_id"]), frozenset())) for r in rows]

    def get_by_id(self, lesson_id: int, *, for_update: bool = False) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            rows = self._select(
                cur,
                "WHERE l.lesson_id=%s",
                (int(lesson_id),),
                suffix="FOR UPDATE" if for_update else "",
            )
            return rows[0] if rows else None

    def create(self, lesson: NewLesson) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lessons(teacher_id, group_id, start_time, end_time, room, `desc`, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    lesson.teacher_id,
                    lesson.group_id,
                    lesson.start_time,
                    lesson.end_time,
                    lesson.room,
                    lesson.desc,
                    lesson.status.value,
                ),
            )
            lesson_id = int(cur.lastrowid)
            self._write_weekdays(cur, lesson_id, lesson.weekdays)
            return lesson_id

    def save(self, lesson: Lesson) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET teacher_id=%s, group_id=%s, start_time=%s, end_time=%s, room=%s, `desc`=%s, status=%s
                WHERE lesson_id=%s
                """,
                (
                    lesson.teacher_id,
                    lesson.group_id,
                    lesson.start_time,
                    lesson.end_time,
                    lesson.room,
                    lesson.desc,
                    lesson.status.value,
                    int(lesson.lesson_id),
                ),
            )
            cur.execute("SELECT 1 AS found FROM lessons WHERE lesson_id=%s", (int(lesson.lesson_id),))
            if not fetchone(cur):
                return False
            self._write_weekdays(cur, lesson.lesson_id, lesson.weekdays)
            return True

    def delete(self, lesson_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM lesson_weekdays WHERE lesson_id=%s", (int(lesson_id),))
            cur.execute("DELETE FROM lessons WHERE lesson_id=%s", (int(lesson_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur)

    def list_scheduled_for_weekday(self, weekday: Weekday) -> Sequence[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(
                cur,
                """
                JOIN lesson_weekdays wd ON wd.lesson_id = l.lesson_id
                WHERE wd.weekday=%s AND l.status=%s
                """,
                (weekday.value, LessonStatus.SCHEDULED.value),
            )
