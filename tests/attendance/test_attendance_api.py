from __future__ import annotations

import io
from datetime import date, datetime

import pytest

from campus_attendance.attendance import controller as attendance_controller
from campus_attendance.attendance.qr_image import render_png
from campus_attendance.core.enums import AttendanceStatus


def test_check_in_requires_login(client):
    resp = client.post("/api/student/attendance", json={"qr_code": "ABC123"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_check_in_records_attendance(student_client, repos):
    resp = student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["already_recorded"] is False
    assert body["attendance"]["status"] == "present"
    assert body["attendance"]["student_id"] == "S1"
    assert body["module"] == {"name": "Databases", "code": "DB301"}
    assert body["session"]["time"] == "08:00 - 09:30"
    assert len(repos.attendance.records) == 1


def test_check_in_accepts_camel_case_field(student_client):
    resp = student_client.post("/api/student/attendance", json={"qrCode": "ABC123"})
    assert resp.status_code == 200


def test_second_scan_reports_existing_record(student_client, repos):
    student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})
    resp = student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})

    assert resp.status_code == 200
    assert resp.get_json()["already_recorded"] is True
    assert len(repos.attendance.records) == 1


@pytest.mark.parametrize("payload", [{}, {"qr_code": ""}, {"qr_code": "UNKNOWN"}])
def test_bad_codes_answer_400(student_client, payload):
    resp = student_client.post("/api/student/attendance", json=payload)
    assert resp.status_code == 400


def test_numeric_code_answers_400_not_500(student_client, repos):
    resp = student_client.post("/api/student/attendance", json={"qr_code": 123456})

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Invalid or expired QR code"}
    assert repos.attendance.records == {}
    assert resp.get_json()["success"] is False


def test_expired_code_answers_400(student_client, clock):
    clock.state.now = datetime(2024, 1, 15, 10, 0, 1)
    resp = student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "QR code has expired"


def test_write_failure_answers_500(student_client, repos):
    repos.attendance.fail_insert = True
    resp = student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Failed to record attendance"


def test_teacher_cannot_check_in(login):
    resp = login("T1", "teacher").post("/api/student/attendance", json={"qr_code": "ABC123"})
    assert resp.status_code == 403


def test_history_filters_by_status(student_client, repos):
    repos.attendance.add(
        student_id="S1",
        module_id=1,
        course_id=None,
        timetable_id=42,
        attendance_date=date(2024, 1, 8),
        recorded_at=datetime(2024, 1, 8, 8, 0),
        status=AttendanceStatus.ABSENT,
    )
    student_client.post("/api/student/attendance", json={"qr_code": "ABC123"})

    everything = student_client.get("/api/student/attendance").get_json()["attendance_records"]
    assert [r["date"] for r in everything] == ["2024-01-15", "2024-01-08"]

    absences = student_client.get("/api/student/attendance?status=absent").get_json()["attendance_records"]
    assert [r["status"] for r in absences] == ["absent"]

    assert student_client.get("/api/student/attendance?status=bogus").status_code == 400


def test_image_check_in_uses_decoded_text(student_client, monkeypatch):
    monkeypatch.setattr(attendance_controller, "decode_image", lambda stream: "ABC123")
    resp = student_client.post(
        "/api/student/attendance/image",
        data={"image": (io.BytesIO(b"fake"), "qr.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["status"] == "present"


def test_image_check_in_without_file(student_client):
    resp = student_client.post("/api/student/attendance/image", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_decode_rendered_qr_image():
    pytest.importorskip("pyzbar.pyzbar")
    from campus_attendance.attendance.qr_image import decode_image

    assert decode_image(render_png("ABC123")) == "ABC123"


def test_teacher_generates_code_and_old_one_is_closed(login, repos, fixed_now):
    client = login("T1", "teacher")
    resp = client.post("/api/teacher/qr-codes", json={"timetable_id": 42})

    assert resp.status_code == 201
    body = resp.get_json()
    code = body["qr_code"]["code"]
    assert body["qr_code"]["expires_at"] == "2024-01-15T09:15:00"
    assert repos.scan_codes.get_active_by_code(code) is not None
    assert repos.scan_codes.get_active_by_code("ABC123") is None

    image = client.get(body["image_url"])
    assert image.status_code == 200
    assert image.mimetype == "image/png"
    assert image.data.startswith(b"\x89PNG")


def test_teacher_cannot_open_someone_elses_session(login):
    resp = login("T2", "teacher").post("/api/teacher/qr-codes", json={"timetable_id": 42})
    assert resp.status_code == 403


def test_teacher_generate_unknown_session(login):
    resp = login("T1", "teacher").post("/api/teacher/qr-codes", json={"timetable_id": 999})
    assert resp.status_code == 404


def test_teacher_deactivates_code(login, repos):
    client = login("T1", "teacher")
    assert client.delete("/api/teacher/qr-codes/ABC123").status_code == 200
    assert repos.scan_codes.get_active_by_code("ABC123") is None
    assert client.delete("/api/teacher/qr-codes/ABC123").status_code == 400
