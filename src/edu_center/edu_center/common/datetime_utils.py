from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import InvalidDateError, ValidationError


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into a civil date.

    A ``datetime`` is rejected; only calendar dates are accepted.
    """
    if isinstance(value, datetime):
        raise InvalidDateError(f"Expected a calendar date, got a timestamp: {value.isoformat()}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date: {value!r}")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateError(f"Invalid date format: {value!r}. Use YYYY-MM-DD")


def parse_time_of_day(value: Union[str, time, None], field_name: str) -> time | None:
    """Parse HH:MM (or HH:MM:SS) into ``datetime.time``; ``None``/blank stays ``None``."""
    if value is None or isinstance(value, time):
        return value
    v = str(value).strip()
    if not v:
        return None
    for fmt in (TIME_FORMAT, "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid {field_name} (HH:MM): {value!r}")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Services take an explicit ``now`` in tests.
    """
    return datetime.now()
