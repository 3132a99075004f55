from __future__ import annotations

import io
import os
from datetime import date, datetime

import pytest
from werkzeug.datastructures import FileStorage

from campus_attendance.core.enums import AttendanceStatus, JustificationStatus, UserType
from campus_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def absence(repos):
    return repos.attendance.add(
        student_id="S1",
        module_id=1,
        course_id=None,
        timetable_id=42,
        attendance_date=date(2024, 1, 8),
        recorded_at=datetime(2024, 1, 8, 8, 0),
        status=AttendanceStatus.ABSENT,
    )


def _submit(container, **overrides):
    args = dict(student_id="S1", student_name="Ahmed", module_id=1, absence_date="2024-01-08", reason="Sick")
    args.update(overrides)
    return container.justification_service.submit(**args)


def test_submit_without_file_stores_reason(container, repos, absence):
    justification_id = _submit(container)

    j = repos.justifications.get_by_id(justification_id)
    assert j.status == JustificationStatus.PENDING
    assert j.attendance_id == absence.attendance_id
    assert j.file_path == "Sick"

    [notification] = repos.notifications.list_active()
    assert notification.target_user_type == "teacher"
    assert notification.created_by == "S1"


def test_submit_with_file_saves_under_student_folder(container, repos, absence, tmp_path):
    upload = FileStorage(stream=io.BytesIO(b"%PDF-1.4"), filename="../certificat medical.pdf")
    justification_id = _submit(container, upload=upload)

    path = repos.justifications.get_by_id(justification_id).file_path
    assert os.path.dirname(path) == str(tmp_path / "uploads" / "S1")
    assert path.endswith("_certificat_medical.pdf")
    with open(path, "rb") as fh:
        assert fh.read() == b"%PDF-1.4"


def test_submit_rejects_unsupported_file(container, absence):
    upload = FileStorage(stream=io.BytesIO(b"MZ"), filename="virus.exe")
    with pytest.raises(ValidationError):
        _submit(container, upload=upload)


@pytest.mark.parametrize("missing", ["module_id", "absence_date", "reason"])
def test_submit_requires_fields(container, absence, missing):
    with pytest.raises(ValidationError):
        _submit(container, **{missing: ""})


def test_submit_without_matching_absence(container, absence):
    with pytest.raises(NotFoundError):
        _submit(container, absence_date="2024-01-09")


def test_teacher_approval_excuses_absence(container, repos, absence):
    justification_id = _submit(container)
    assert [j["id"] for j in container.justification_service.list_for_review("T1")] == [justification_id]
    assert container.justification_service.list_for_review("T2") == []

    status = container.justification_service.review(
        reviewer_id="T1", reviewer_type=UserType.TEACHER, justification_id=justification_id,
        decision="approved", comments="ok",
    )
    assert status == JustificationStatus.APPROVED
    assert repos.attendance.get_by_id(absence.attendance_id).status == AttendanceStatus.EXCUSED
    assert repos.justifications.get_by_id(justification_id).reviewed_by == "T1"

    with pytest.raises(ValidationError):
        container.justification_service.review(
            reviewer_id="T1", reviewer_type=UserType.TEACHER, justification_id=justification_id, decision="rejected"
        )


def test_rejection_keeps_absence(container, repos, absence):
    justification_id = _submit(container)
    container.justification_service.review(
        reviewer_id="A1", reviewer_type=UserType.ADMIN, justification_id=justification_id, decision="rejected"
    )
    assert repos.attendance.get_by_id(absence.attendance_id).status == AttendanceStatus.ABSENT


def test_other_teacher_cannot_review(container, absence):
    justification_id = _submit(container)
    with pytest.raises(AuthorizationError):
        container.justification_service.review(
            reviewer_id="T2", reviewer_type=UserType.TEACHER, justification_id=justification_id, decision="approved"
        )


def test_review_decision_must_be_final(container, absence):
    justification_id = _submit(container)
    with pytest.raises(ValidationError):
        container.justification_service.review(
            reviewer_id="T1", reviewer_type=UserType.TEACHER, justification_id=justification_id, decision="pending"
        )


def test_justification_endpoints(student_client, login, repos, absence):
    resp = student_client.post(
        "/api/student/justifications",
        data={"moduleId": "1", "absenceDate": "2024-01-08", "reason": "Sick",
              "file": (io.BytesIO(b"img"), "note.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    justification_id = resp.get_json()["id"]

    mine = student_client.get("/api/student/justifications").get_json()["justifications"]
    assert [j["id"] for j in mine] == [justification_id]

    teacher = login("T1", "teacher")
    assert len(teacher.get("/api/teacher/justifications").get_json()["justifications"]) == 1
    review = teacher.post(f"/api/justifications/{justification_id}/review", json={"status": "approved"})
    assert review.status_code == 200
    assert repos.attendance.get_by_id(absence.attendance_id).status == AttendanceStatus.EXCUSED


def test_justification_endpoint_missing_absence(student_client):
    resp = student_client.post(
        "/api/student/justifications", json={"module_id": 1, "absence_date": "2024-01-09", "reason": "Sick"}
    )
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "No matching absence record found"
