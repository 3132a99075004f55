from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import current_user_type, handles_errors, json_body, roles_required
from ..container import Container
from ..core.enums import UserType


def register(app: Flask, container: Container) -> None:
    @app.route("/api/student/justifications", methods=["GET"], endpoint="api_student_justifications")
    @roles_required(UserType.STUDENT)
    @handles_errors("Failed to fetch justifications")
    def my_justifications():
        items = container.justification_service.list_mine(session["user_id"])
        return jsonify({"success": True, "justifications": list(items)}), 200

    @app.route("/api/student/justifications", methods=["POST"], endpoint="api_student_justifications_submit")
    @roles_required(UserType.STUDENT)
    @handles_errors("Failed to submit justification")
    def submit_justification():
        # multipart form (with optional file) or plain JSON
        form = request.form if request.form else json_body()
        justification_id = container.justification_service.submit(
            student_id=session["user_id"],
            student_name=session.get("name"),
            module_id=form.get("module_id") or form.get("moduleId"),
            absence_date=form.get("absence_date") or form.get("absenceDate"),
            reason=form.get("reason"),
            upload=request.files.get("file"),
        )
        return (
            jsonify({"success": True, "message": "Justification submitted successfully", "id": justification_id}),
            201,
        )

    @app.route("/api/teacher/justifications", methods=["GET"], endpoint="api_teacher_justifications")
    @roles_required(UserType.TEACHER)
    @handles_errors("Failed to fetch justifications")
    def justifications_to_review():
        items = container.justification_service.list_for_review(session["user_id"])
        return jsonify({"success": True, "justifications": list(items)}), 200

    @app.route(
        "/api/justifications/<int:justification_id>/review",
        methods=["POST"],
        endpoint="api_justification_review",
    )
    @roles_required(UserType.TEACHER, UserType.ADMIN, UserType.TECH_ADMIN)
    @handles_errors("Failed to review justification")
    def review_justification(justification_id: int):
        data = json_body()
        status = container.justification_service.review(
            reviewer_id=session["user_id"],
            reviewer_type=current_user_type(),
            justification_id=justification_id,
            decision=data.get("status") or data.get("decision"),
            comments=data.get("comments"),
        )
        return jsonify({"success": True, "message": f"Justification {status.value}"}), 200
