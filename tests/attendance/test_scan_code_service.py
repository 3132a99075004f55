from __future__ import annotations

from datetime import datetime

import pytest

from campus_attendance.attendance.scan_codes import ScanCodeService
from campus_attendance.core.exceptions import AuthorizationError, NotFoundError


def _service(repos, now, **kwargs) -> ScanCodeService:
    return ScanCodeService(repos.scan_codes, repos.timetable, clock=lambda: now, **kwargs)


def test_generate_uses_ttl_and_token(repos, fixed_now):
    svc = _service(repos, fixed_now, ttl_minutes=30, token_factory=lambda: "TOKEN1")
    scan_code = svc.generate(teacher_id="T1", timetable_id=42, course_id=5)

    assert scan_code.code == "TOKEN1"
    assert scan_code.expires_at == datetime(2024, 1, 15, 9, 30)
    assert scan_code.course_id == 5
    stored = repos.scan_codes.get_active_by_code("TOKEN1")
    assert stored.timetable_id == 42
    assert stored.teacher_id == "T1"


def test_only_latest_code_stays_active(repos, fixed_now):
    tokens = iter(["FIRST", "SECOND"])
    svc = _service(repos, fixed_now, token_factory=lambda: next(tokens))
    svc.generate(teacher_id="T1", timetable_id=42)
    svc.generate(teacher_id="T1", timetable_id=42)

    active = [c.code for c in repos.scan_codes.codes.values() if c.is_active]
    assert active == ["SECOND"]


def test_generated_code_checks_in(repos, fixed_now, container):
    code = container.scan_code_service.generate(teacher_id="T1", timetable_id=42).code
    result = container.check_in_service.check_in("S1", code)
    assert result.record.timetable_id == 42


def test_ttl_must_be_positive(repos, fixed_now):
    with pytest.raises(ValueError):
        _service(repos, fixed_now, ttl_minutes=0)


def test_only_owner_can_render_code(repos, fixed_now):
    svc = _service(repos, fixed_now)
    assert svc.get_owned(teacher_id="T1", code="ABC123").code == "ABC123"
    with pytest.raises(AuthorizationError):
        svc.get_owned(teacher_id="T2", code="ABC123")
    with pytest.raises(NotFoundError):
        svc.get_owned(teacher_id="T1", code="MISSING")
