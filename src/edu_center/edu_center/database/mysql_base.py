from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.constants import MYSQL_DUPLICATE_KEY_ERRNO
from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Connection of the transaction currently open in this context (thread / task).
_active_conn: ContextVar[Optional[Any]] = ContextVar("edu_center_active_conn", default=None)


@contextmanager
def transaction(conn_factory: DatabaseConnection) -> Iterator[Any]:
    """Run every ``db_cursor`` block inside the ``with`` on one connection.

    Commits once on exit, rolls back everything on error. Nested calls join the
    outer transaction.
    """
    outer = _active_conn.get()
    if outer is not None:
        yield outer
        return

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Cannot open database connection: %s", e, exc_info=True)
        raise StorageError("Database unavailable") from e

    token = _active_conn.set(conn)
    try:
        yield conn
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Database error: %s", e, exc_info=True)
        raise StorageError("Database error") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        _active_conn.reset(token)
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    with transaction(conn_factory) as conn:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        finally:
            cur.close()


def is_duplicate_key(err: mysql.connector.Error) -> bool:
    return getattr(err, "errno", None) == MYSQL_DUPLICATE_KEY_ERRNO


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        return time(hour=total_seconds // 3600, minute=(total_seconds % 3600) // 60, second=total_seconds % 60)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
