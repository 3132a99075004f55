from __future__ import annotations

from datetime import time

import pytest

from campus_attendance.core.exceptions import NotFoundError
from campus_attendance.timetable.service import TimetableService, group_by_day

from fakes import demo_entry


def test_group_by_day_has_all_keys_sorted_by_start():
    entries = [
        demo_entry(timetable_id=1, day_of_week=2, start_time=time(14, 0), end_time=time(15, 30)),
        demo_entry(timetable_id=2, day_of_week=2, start_time=time(8, 0), end_time=time(9, 30)),
        demo_entry(timetable_id=3, day_of_week=7),
    ]
    by_day = group_by_day(entries)

    assert list(by_day) == ["1", "2", "3", "4", "5", "6", "7"]
    assert [e["timetable_id"] for e in by_day["2"]] == [2, 1]
    assert by_day["2"][0]["time"] == "08:00 - 09:30"
    assert [e["timetable_id"] for e in by_day["7"]] == [3]
    assert by_day["1"] == []


def test_student_timetable_filters_by_group(repos, fixed_now):
    svc = TimetableService(repos.timetable, repos.academics, clock=lambda: fixed_now)
    data = svc.student_timetable(specialization_id=1, group_id=1)

    ids = [e["timetable_id"] for day in data["timetable"].values() for e in day]
    # 44 belongs to group 2
    assert sorted(ids) == [42, 43]
    assert data["specialization"]["code"] == "IS"
    assert data["current_semester"]["name"] == "Semester 1"
    assert {m["code"] for m in data["modules"]} == {"DB301", "WEB302"}


def test_student_without_specialization(repos, fixed_now):
    svc = TimetableService(repos.timetable, repos.academics, clock=lambda: fixed_now)
    with pytest.raises(NotFoundError):
        svc.student_timetable(specialization_id=None, group_id=1)
    with pytest.raises(NotFoundError):
        svc.student_timetable(specialization_id=99, group_id=1)


def test_today_uses_clock_weekday(repos, fixed_now):
    svc = TimetableService(repos.timetable, repos.academics, clock=lambda: fixed_now)
    # fixed_now is a Monday
    assert [e["timetable_id"] for e in svc.student_today(specialization_id=1, group_id=1)] == [42]
    assert [e["timetable_id"] for e in svc.teacher_today("T1")] == [42, 44]
    assert svc.teacher_today("T2") == []


def test_timetable_endpoints(student_client, login):
    resp = student_client.get("/api/student/timetable")
    assert resp.status_code == 200
    assert resp.get_json()["timetable"]["3"][0]["room"] == "LAB2"

    teacher = login("T2", "teacher").get("/api/teacher/timetable")
    assert teacher.status_code == 200
    assert teacher.get_json()["timetable"]["3"][0]["module"]["code"] == "WEB302"


def test_student_timetable_without_specialization_is_404(login):
    resp = login("S9", "student").get("/api/student/timetable")
    assert resp.status_code == 404
