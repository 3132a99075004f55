from __future__ import annotations

from datetime import date, datetime

from campus_attendance.core.enums import AttendanceStatus


def test_student_dashboard(student_client, repos):
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

    body = student_client.get("/api/dashboard").get_json()
    dashboard = body["dashboard"]
    assert dashboard["user_type"] == "student"
    assert dashboard["attendance"] == {"present": 1, "absent": 1, "late": 0, "excused": 0, "total": 2}
    assert dashboard["pending_justifications"] == 0
    assert [e["timetable_id"] for e in dashboard["today"]] == [42]


def test_teacher_dashboard(login):
    dashboard = login("T1", "teacher").get("/api/dashboard").get_json()["dashboard"]
    assert dashboard["modules"] == [{"id": 1, "name": "Databases", "code": "DB301"}]
    assert [e["timetable_id"] for e in dashboard["today"]] == [42, 44]


def test_admin_dashboard(login):
    dashboard = login("A1", "tech-admin").get("/api/dashboard").get_json()["dashboard"]
    assert dashboard["users"]["student"] == 1
    assert dashboard["users"]["tech-admin"] == 0
    assert dashboard["modules"] == 2
    assert dashboard["active_notifications"] == 0


def test_dashboard_requires_login(client):
    assert client.get("/api/dashboard").status_code == 401
