from __future__ import annotations

from src.edu_center.edu_center.core.exceptions import StorageError

LESSON_BODY = {
    "teacher_id": "t-1",
    "group_id": "g-1",
    "weekdays": ["Monday", "Tuesday"],
    "start_time": "10:00",
    "end_time": "11:30",
    "room": "Room 101",
}


def _create_lesson(client, **overrides):
    body = dict(LESSON_BODY, **overrides)
    res = client.post("/api/lessons", json=body)
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def test_health(anonymous_client):
    res = anonymous_client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_create_lesson_requires_sign_in(anonymous_client):
    res = anonymous_client.post("/api/lessons", json=LESSON_BODY)
    assert res.status_code == 401
    assert res.get_json()["error"] == "Unauthorized"


def test_create_lesson_is_admin_only(teacher_client, store):
    res = teacher_client.post("/api/lessons", json=LESSON_BODY)
    assert res.status_code == 403
    assert res.get_json() == {"success": False, "error": "Forbidden", "message": "You do not have permission"}
    assert store.lessons == {}


def test_create_lesson(admin_client):
    data = _create_lesson(admin_client)

    assert data["id"] == 1
    assert data["weekdays"] == ["Monday", "Tuesday"]
    assert data["start_time"] == "10:00"
    assert data["end_time"] == "11:30"
    assert data["status"] == "Scheduled"
    assert data["desc"] == ""


def test_create_lesson_validation_errors(admin_client):
    res = admin_client.post("/api/lessons", json=dict(LESSON_BODY, start_time="12:00"))
    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidTimeWindow"

    res = admin_client.post("/api/lessons", json=dict(LESSON_BODY, weekdays=["Sunday"]))
    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidWeekday"

    body = dict(LESSON_BODY)
    del body["room"]
    res = admin_client.post("/api/lessons", json=body)
    assert res.status_code == 400
    assert res.get_json()["error"] == "MissingField"


def test_lessons_by_date_on_sunday_reports_monday(admin_client, teacher_client):
    lesson = _create_lesson(admin_client)

    res = teacher_client.get("/api/lessons/date?date=2024-03-10")

    assert res.status_code == 200
    data = res.get_json()
    assert data["requested_date"] == "2024-03-10"
    assert data["date"] == "2024-03-11"
    assert data["day_of_week"] == "Monday"
    assert [l["id"] for l in data["lessons"]] == [lesson["id"]]


def test_lessons_by_date_requires_valid_date(teacher_client):
    res = teacher_client.get("/api/lessons/date")
    assert res.status_code == 400
    assert res.get_json()["error"] == "MissingField"

    res = teacher_client.get("/api/lessons/date?date=2024-02-30")
    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidDate"


def test_update_lesson(admin_client):
    lesson = _create_lesson(admin_client)

    res = admin_client.patch(f"/api/lessons/{lesson['id']}", json={"room": "Room 9", "status": "Completed"})

    assert res.status_code == 200
    data = res.get_json()
    assert data["room"] == "Room 9"
    assert data["status"] == "Completed"
    assert data["start_time"] == "10:00"


def test_unknown_lesson_is_404(admin_client):
    assert admin_client.get("/api/lessons/99").status_code == 404

    res = admin_client.post("/api/lessons/99/attendance", json={"student_id": "s-1", "date": "2024-03-05"})
    assert res.status_code == 404
    assert res.get_json()["error"] == "NotFound"


def test_record_attendance_then_duplicate(admin_client, teacher_client):
    lesson = _create_lesson(admin_client)
    url = f"/api/lessons/{lesson['id']}/attendance"

    res = teacher_client.post(url, json={"student_id": "s-1", "date": "2024-03-05"})
    assert res.status_code == 201
    data = res.get_json()
    assert data["lesson_id"] == lesson["id"]
    assert data["student_id"] == "s-1"
    assert data["teacher_id"] is None
    assert data["date"] == "2024-03-05"
    assert data["desc"] == "Present"

    res = teacher_client.post(url, json={"student_id": "s-1", "date": "2024-03-05"})
    assert res.status_code == 409
    assert res.get_json()["error"] == "DuplicateAttendance"


def test_record_attendance_errors(admin_client, teacher_client):
    lesson = _create_lesson(admin_client)
    url = f"/api/lessons/{lesson['id']}/attendance"

    res = teacher_client.post(url, json={"student_id": "s-1"})
    assert (res.status_code, res.get_json()["error"]) == (400, "MissingField")

    res = teacher_client.post(url, json={"student_id": "s-1", "date": "2024-03-06"})
    assert (res.status_code, res.get_json()["error"]) == (400, "DayMismatch")

    res = teacher_client.post(url, json={"student_id": "s-1", "teacher_id": "t-1", "date": "2024-03-05"})
    assert (res.status_code, res.get_json()["error"]) == (400, "InvalidSubject")


def test_attendance_listing_and_description_update(admin_client, teacher_client):
    lesson = _create_lesson(admin_client)
    created = teacher_client.post(
        f"/api/lessons/{lesson['id']}/attendance", json={"teacher_id": "t-1", "date": "2024-03-04"}
    ).get_json()

    res = teacher_client.patch(f"/api/attendances/{created['id']}", json={"desc": "Late"})
    assert res.status_code == 200
    assert res.get_json()["desc"] == "Late"

    listed = teacher_client.get("/api/attendances?date=2024-03-04").get_json()
    assert [r["id"] for r in listed] == [created["id"]]
    assert listed[0]["desc"] == "Late"

    by_lesson = teacher_client.get(f"/api/lessons/{lesson['id']}/attendance").get_json()
    assert [r["id"] for r in by_lesson] == [created["id"]]


def test_delete_attendance_through_wrong_lesson(admin_client, teacher_client):
    first = _create_lesson(admin_client)
    second = _create_lesson(admin_client, room="Room 202")
    created = teacher_client.post(
        f"/api/lessons/{first['id']}/attendance", json={"student_id": "s-1", "date": "2024-03-05"}
    ).get_json()

    res = teacher_client.delete(f"/api/lessons/{second['id']}/attendance/{created['id']}")
    assert (res.status_code, res.get_json()["error"]) == (400, "MismatchedLesson")

    res = teacher_client.delete(f"/api/lessons/{first['id']}/attendance/{created['id']}")
    assert res.status_code == 200
    assert teacher_client.get(f"/api/attendances/{created['id']}").status_code == 404


def test_delete_lesson_purges_attendance(admin_client, teacher_client, store):
    lesson = _create_lesson(admin_client)
    for student in ("s-1", "s-2"):
        teacher_client.post(
            f"/api/lessons/{lesson['id']}/attendance", json={"student_id": student, "date": "2024-03-05"}
        )

    assert teacher_client.delete(f"/api/lessons/{lesson['id']}").status_code == 403

    res = admin_client.delete(f"/api/lessons/{lesson['id']}")
    assert res.status_code == 200
    assert res.get_json()["purged_attendance"] == 2
    assert store.attendance == {}
    assert admin_client.get(f"/api/lessons/{lesson['id']}").status_code == 404


def test_unknown_route_uses_json_error(anonymous_client):
    res = anonymous_client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_non_string_desc_is_accepted_as_text(admin_client, teacher_client):
    lesson = _create_lesson(admin_client, desc=5)
    assert lesson["desc"] == "5"

    res = teacher_client.post(
        f"/api/lessons/{lesson['id']}/attendance", json={"student_id": "s-1", "date": "2024-03-05", "desc": 5}
    )
    assert res.status_code == 201
    assert res.get_json()["desc"] == "5"


def test_unknown_lesson_without_date_is_404(teacher_client):
    res = teacher_client.post("/api/lessons/99/attendance", json={"student_id": "s-1"})
    assert (res.status_code, res.get_json()["error"]) == (404, "NotFound")


def test_storage_failure_is_opaque_500(teacher_client, attendance_service, monkeypatch):
    def unavailable(_value):
        raise StorageError("Lost connection to MySQL server at 10.0.0.5")

    monkeypatch.setattr(attendance_service, "list_for_date", unavailable)

    res = teacher_client.get("/api/attendances?date=2024-03-05")

    assert res.status_code == 500
    assert res.get_json() == {"success": False, "error": "InternalError", "message": "Internal server error"}
