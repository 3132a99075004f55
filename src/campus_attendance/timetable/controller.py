from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import handles_errors, roles_required
from ..container import Container
from ..core.enums import UserType


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/timetable", methods=["GET"], endpoint="api_student_timetable")
    @roles_required(UserType.STUDENT)
    @handles_errors("Failed to fetch timetable")
    def student_timetable():
        data = container.timetable_service.student_timetable(
            specialization_id=session.get("specialization_id"),
            group_id=session.get("group_id"),
        )
        return jsonify({"success": True, **data}), 200

    @app.route("/api/teacher/timetable", methods=["GET"], endpoint="api_teacher_timetable")
    @roles_required(UserType.TEACHER)
    @handles_errors("Failed to fetch timetable")
    def teacher_timetable():
        data = container.timetable_service.teacher_timetable(session["user_id"])
        return jsonify({"success": True, **data}), 200
