from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date
from ..common.http import admin_required, json_body, login_required, staff_required
from ..core.exceptions import MissingFieldError
from ..container import Container
from .model import AttendanceRecord


def attendance_to_dict(record: AttendanceRecord) -> dict:
    return {
        "id": record.attendance_id,
        "lesson_id": record.lesson_id,
        "student_id": record.student_id,
        "teacher_id": record.teacher_id,
        "date": format_date(record.attended_on),
        "desc": record.desc,
        "created_at": record.created_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/lessons/<int:lesson_id>/attendance", methods=["GET"], endpoint="api_lesson_attendance_list")
    @login_required
    def api_lesson_attendance_list(lesson_id: int):
        return jsonify([attendance_to_dict(r) for r in attendance.list_for_lesson(lesson_id)])

    @app.route("/api/lessons/<int:lesson_id>/attendance", methods=["POST"], endpoint="api_lesson_attendance_create")
    @staff_required
    def api_lesson_attendance_create(lesson_id: int):
        data = json_body()
        record = attendance.record_attendance(
            lesson_id=lesson_id,
            student_id=data.get("student_id"),
            teacher_id=data.get("teacher_id"),
            attended_on=data.get("date"),
            desc=data.get("desc"),
        )
        return jsonify(attendance_to_dict(record)), 201

    @app.route("/api/lessons/<int:lesson_id>/attendance", methods=["DELETE"], endpoint="api_lesson_attendance_purge")
    @admin_required
    def api_lesson_attendance_purge(lesson_id: int):
        removed = attendance.purge_for_template(lesson_id)
        return jsonify({"success": True, "removed": removed})

    @app.route(
        "/api/lessons/<int:lesson_id>/attendance/<int:attendance_id>",
        methods=["DELETE"],
        endpoint="api_lesson_attendance_delete",
    )
    @staff_required
    def api_lesson_attendance_delete(lesson_id: int, attendance_id: int):
        attendance.delete_attendance(lesson_id, attendance_id)
        return jsonify({"success": True, "message": "Attendance deleted successfully"})

    @app.route("/api/attendances", methods=["GET"], endpoint="api_attendances_by_date")
    @login_required
    def api_attendances_by_date():
        date_s = request.args.get("date")
        if not date_s:
            raise MissingFieldError("date", "Date parameter is required")
        return jsonify([attendance_to_dict(r) for r in attendance.list_for_date(date_s)])

    @app.route("/api/attendances/<int:attendance_id>", methods=["GET"], endpoint="api_attendances_get")
    @login_required
    def api_attendances_get(attendance_id: int):
        return jsonify(attendance_to_dict(attendance.get_attendance(attendance_id)))

    @app.route("/api/attendances/<int:attendance_id>", methods=["PATCH"], endpoint="api_attendances_update")
    @staff_required
    def api_attendances_update(attendance_id: int):
        record = attendance.update_description(attendance_id, json_body().get("desc"))
        return jsonify(attendance_to_dict(record))
