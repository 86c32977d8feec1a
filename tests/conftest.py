from __future__ import annotations

from datetime import datetime

import pytest

from src.edu_center.edu_center.container import wire
from src.edu_center.edu_center.main import create_app
from tests.fakes import InMemoryAttendance, InMemoryLessons, InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 5, 10, 15, 0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def container(store):
    return wire(lessons_repo=InMemoryLessons(store), attendance_repo=InMemoryAttendance(store))


@pytest.fixture
def lesson_service(container):
    return container.lesson_service


@pytest.fixture
def attendance_service(container):
    return container.attendance_service


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


def _client_as(app, role: str | None):
    client = app.test_client()
    if role is not None:
        with client.session_transaction() as sess:
            sess["user_id"] = f"{role}-1"
            sess["role"] = role
    return client


@pytest.fixture
def anonymous_client(app):
    return _client_as(app, None)


@pytest.fixture
def admin_client(app):
    return _client_as(app, "admin")


@pytest.fixture
def teacher_client(app):
    return _client_as(app, "teacher")
