"""Calendar resolution: map a civil date onto the recurring weekday schedule.

The center holds no sessions on Sunday. A date that falls on a Sunday is
resolved against the following Monday's schedule.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Union

from ..core.enums import Weekday
from ..core.exceptions import InvalidWeekdayError
from .datetime_utils import parse_iso_date

SUNDAY_ISO = 7

# ISO weekday number -> Weekday (Sunday intentionally absent)
ISO_WEEKDAY_MAP = {
    1: Weekday.MONDAY,
    2: Weekday.TUESDAY,
    3: Weekday.WEDNESDAY,
    4: Weekday.THURSDAY,
    5: Weekday.FRIDAY,
    6: Weekday.SATURDAY,
}


def resolve_schedule_date(value: Union[str, date]) -> date:
    """Return the date whose weekday drives recurrence matching.

    Raises ``InvalidDateError`` for malformed input.
    """
    d = parse_iso_date(value)
    if d.isoweekday() == SUNDAY_ISO:
        return d + timedelta(days=1)
    return d


def resolve_weekday(value: Union[str, date]) -> Weekday:
    return ISO_WEEKDAY_MAP[resolve_schedule_date(value).isoweekday()]


def parse_weekday(value: Union[str, Weekday]) -> Weekday:
    if isinstance(value, Weekday):
        return value
    if not isinstance(value, str):
        raise InvalidWeekdayError(f"Invalid weekday: {value!r}")
    needle = value.strip().lower()
    for day in Weekday:
        if day.value.lower() == needle or day.name.lower() == needle:
            return day
    raise InvalidWeekdayError(f"Invalid weekday: {value!r}")


def parse_weekdays(values: Iterable[Union[str, Weekday]] | None) -> frozenset[Weekday]:
    """Parse a list of weekday names into a set; ``None`` means no weekdays."""
    if values is None:
        return frozenset()
    if not isinstance(values, (list, tuple, set, frozenset)):
        raise InvalidWeekdayError("Invalid weekdays format: expected a list of weekday names")
    return frozenset(parse_weekday(v) for v in values)


def sort_weekdays(days: Iterable[Weekday]) -> list[Weekday]:
    order = list(Weekday)
    return sorted(days, key=order.index)
