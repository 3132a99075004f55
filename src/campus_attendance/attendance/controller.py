from __future__ import annotations

from flask import Flask, jsonify, request, send_file, session, url_for

from ..common.serialization import to_json
from ..common.validators import optional_int, require_positive_int
from ..common.web import error_response, fail, handles_errors, json_body, roles_required
from ..container import Container
from ..core.enums import UserType
from ..core.exceptions import DomainError
from .qr_image import decode_image, render_png
from .service import format_response


def register(app: Flask, container: Container) -> None:
    def _check_in(code):
        """Run the check-in chain and map its failures onto HTTP answers."""
        try:
            result = container.check_in_service.check_in(session.get("user_id"), code)
        except DomainError as e:
            return error_response(e)
        except Exception:
            app.logger.exception("Check-in failed")
            return fail("Failed to record attendance", 500)
        return jsonify({"success": True, **format_response(result)}), 200

    @app.route("/api/student/attendance", methods=["POST"], endpoint="api_student_check_in")
    @roles_required(UserType.STUDENT)
    def student_check_in():
        data = json_body()
        return _check_in(data.get("qr_code") or data.get("qrCode"))

    @app.route("/api/student/attendance/image", methods=["POST"], endpoint="api_student_check_in_image")
    @roles_required(UserType.STUDENT)
    @handles_errors("Failed to read QR image")
    def student_check_in_image():
        upload = request.files.get("image")
        if upload is None or not upload.filename:
            return fail("No image uploaded", 400)
        return _check_in(decode_image(upload.stream))

    @app.route("/api/student/attendance", methods=["GET"], endpoint="api_student_attendance")
    @roles_required(UserType.STUDENT)
    @handles_errors("Failed to fetch attendance records")
    def student_attendance():
        records = container.attendance_history_service.history(
            session["user_id"],
            status=request.args.get("status"),
            module_id=optional_int(request.args.get("module_id")),
        )
        return jsonify({"success": True, "attendance_records": list(records)}), 200

    @app.route("/api/teacher/qr-codes", methods=["POST"], endpoint="api_teacher_qr_create")
    @roles_required(UserType.TEACHER)
    @handles_errors("Failed to generate QR code")
    def teacher_qr_create():
        data = json_body()
        scan_code = container.scan_code_service.generate(
            teacher_id=session["user_id"],
            timetable_id=require_positive_int(data.get("timetable_id"), "Session"),
            course_id=optional_int(data.get("course_id")),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "qr_code": to_json(scan_code),
                    "image_url": url_for("api_teacher_qr_image", code=scan_code.code),
                }
            ),
            201,
        )

    @app.route("/api/teacher/qr-codes/<code>/image", methods=["GET"], endpoint="api_teacher_qr_image")
    @roles_required(UserType.TEACHER)
    @handles_errors("Failed to render QR code")
    def teacher_qr_image(code: str):
        scan_code = container.scan_code_service.get_owned(teacher_id=session["user_id"], code=code)
        return send_file(render_png(scan_code.code), mimetype="image/png")

    @app.route("/api/teacher/qr-codes/<code>", methods=["DELETE"], endpoint="api_teacher_qr_deactivate")
    @roles_required(UserType.TEACHER)
    @handles_errors("Failed to deactivate QR code")
    def teacher_qr_deactivate(code: str):
        container.scan_code_service.deactivate(teacher_id=session["user_id"], code=code)
        return jsonify({"success": True, "message": "QR code deactivated"}), 200
