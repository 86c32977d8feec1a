from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date, format_time
from ..common.http import admin_required, json_body, login_required
from ..common.weekdays import sort_weekdays
from ..core.exceptions import MissingFieldError
from ..container import Container
from .model import Lesson

_LESSON_FIELDS = ("teacher_id", "group_id", "weekdays", "start_time", "end_time", "room", "desc", "status")


def lesson_to_dict(lesson: Lesson) -> dict:
    return {
        "id": lesson.lesson_id,
        "teacher_id": lesson.teacher_id,
        "group_id": lesson.group_id,
        "weekdays": [d.value for d in sort_weekdays(lesson.weekdays)],
        "start_time": format_time(lesson.start_time),
        "end_time": format_time(lesson.end_time),
        "room": lesson.room,
        "desc": lesson.desc,
        "status": lesson.status.value,
        "created_at": lesson.created_at.isoformat() if lesson.created_at else None,
        "updated_at": lesson.updated_at.isoformat() if lesson.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    lessons = container.lesson_service

    @app.route("/api/lessons", methods=["GET"], endpoint="api_lessons_list")
    @login_required
    def api_lessons_list():
        return jsonify([lesson_to_dict(l) for l in lessons.list_templates()])

    @app.route("/api/lessons", methods=["POST"], endpoint="api_lessons_create")
    @admin_required
    def api_lessons_create():
        data = json_body()
        lesson = lessons.create_template(
            teacher_id=data.get("teacher_id"),
            group_id=data.get("group_id"),
            weekdays=data.get("weekdays"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            room=data.get("room"),
            desc=data.get("desc"),
            status=data.get("status"),
        )
        return jsonify(lesson_to_dict(lesson)), 201

    @app.route("/api/lessons/date", methods=["GET"], endpoint="api_lessons_by_date")
    @login_required
    def api_lessons_by_date():
        date_s = request.args.get("date")
        if not date_s:
            raise MissingFieldError("date", "Date parameter is required")

        day = lessons.schedule_for_date(date_s)
        return jsonify(
            {
                "requested_date": format_date(day.requested_date),
                "date": format_date(day.resolved_date),
                "day_of_week": day.weekday.value,
                "lessons": [lesson_to_dict(l) for l in day.lessons],
            }
        )

    @app.route("/api/lessons/<int:lesson_id>", methods=["GET"], endpoint="api_lessons_get")
    @login_required
    def api_lessons_get(lesson_id: int):
        return jsonify(lesson_to_dict(lessons.get_template(lesson_id)))

    @app.route("/api/lessons/<int:lesson_id>", methods=["PUT", "PATCH"], endpoint="api_lessons_update")
    @admin_required
    def api_lessons_update(lesson_id: int):
        data = json_body()
        fields = {k: data[k] for k in _LESSON_FIELDS if k in data}
        return jsonify(lesson_to_dict(lessons.update_template(lesson_id, **fields)))

    @app.route("/api/lessons/<int:lesson_id>", methods=["DELETE"], endpoint="api_lessons_delete")
    @admin_required
    def api_lessons_delete(lesson_id: int):
        purged = lessons.delete_template(lesson_id)
        return jsonify({"success": True, "message": "Lesson deleted successfully", "purged_attendance": purged})
