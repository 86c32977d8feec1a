from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import MissingFieldError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise MissingFieldError(field_name)
    return str(value).strip()


def require_present(value: Any, field_name: str) -> Any:
    if value is None:
        raise MissingFieldError(field_name)
    return value


def optional_str(value: Any) -> Optional[str]:
    """Blank strings are treated as absent."""
    if value is None:
        return None
    v = str(value).strip()
    return v or None
