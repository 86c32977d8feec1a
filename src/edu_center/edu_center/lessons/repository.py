from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import Lesson, NewLesson


class LessonRepository(Protocol):
    """Giao diện repository cho Lesson.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def atomic(self) -> ContextManager[None]:
        """Everything executed inside the block commits (or fails) as one unit.

        Shared with the attendance repository backed by the same store.
        """

        raise NotImplementedError

    def get_by_id(self, lesson_id: int, *, for_update: bool = False) -> Optional[Lesson]:
        """``for_update`` locks the row until the enclosing ``atomic()`` block ends."""

        raise NotImplementedError

    def create(self, lesson: NewLesson) -> int:
        raise NotImplementedError

    def save(self, lesson: Lesson) -> bool:
        """Overwrite every mutable field of an existing lesson."""

        raise NotImplementedError

    def delete(self, lesson_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Lesson]:
        raise NotImplementedError

    def list_scheduled_for_weekday(self, weekday: Weekday) -> Sequence[Lesson]:
        """Scheduled lessons recurring on ``weekday``, ordered by start time then id."""

        raise NotImplementedError
