from __future__ import annotations

from datetime import datetime, time
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from campus_attendance.academics.model import Group, Level, Module, Specialization
from campus_attendance.attendance.model import ScanCode
from campus_attendance.container import wire_container
from campus_attendance.core.enums import SessionType, UserType
from campus_attendance.main import create_app
from campus_attendance.users.model import User

from fakes import (
    InMemoryAcademics,
    InMemoryAttendance,
    InMemoryJustifications,
    InMemoryNotifications,
    InMemoryScanCodes,
    InMemorySessions,
    InMemoryTimetable,
    InMemoryUsers,
    demo_entry,
    demo_semester,
)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2024-01-15, 09:00 UTC
    return datetime(2024, 1, 15, 9, 0, 0)


@pytest.fixture
def repos(fixed_now):
    academics = InMemoryAcademics(
        levels=[Level(level_id=3, name="Third year licence", code="L3")],
        specializations=[
            Specialization(specialization_id=1, level_id=3, name="Information Systems", code="IS", level_name="L3")
        ],
        semesters=[demo_semester()],
        modules=[
            Module(module_id=1, name="Databases", code="DB301", specialization_id=1, semester_id=1, teacher_id="T1"),
            Module(module_id=2, name="Web Development", code="WEB302", specialization_id=1, semester_id=1, teacher_id="T2"),
        ],
        groups=[Group(group_id=1, name="G1", level_id=3, specialization_id=1, academic_year_id=1, max_students=30)],
    )
    timetable = InMemoryTimetable(
        [
            demo_entry(),
            demo_entry(
                timetable_id=43,
                module_id=2,
                day_of_week=3,
                start_time=time(10, 0),
                end_time=time(11, 30),
                room="LAB2",
                teacher_id="T2",
                session_type=SessionType.TP,
                group_id=1,
                module_name="Web Development",
                module_code="WEB302",
            ),
            demo_entry(timetable_id=44, group_id=2, room="B12", start_time=time(13, 0), end_time=time(14, 30)),
        ]
    )
    users = InMemoryUsers(
        [
            User(user_id="S1", name="Ahmed", password_hash=generate_password_hash("secret1"),
                 user_type=UserType.STUDENT, level_id=3, specialization_id=1, group_id=1),
            User(user_id="T1", name="Dr. Alaoui", password_hash=generate_password_hash("secret1"),
                 user_type=UserType.TEACHER),
            User(user_id="A1", name="Amina", password_hash=generate_password_hash("secret1"),
                 user_type=UserType.ADMIN),
        ]
    )
    scan_codes = InMemoryScanCodes(
        [
            ScanCode(qr_code_id=1, code="ABC123", teacher_id="T1", timetable_id=42, course_id=7,
                     is_active=True, expires_at=datetime(2024, 1, 15, 10, 0, 0)),
        ]
    )
    return SimpleNamespace(
        users=users,
        sessions=InMemorySessions(),
        academics=academics,
        timetable=timetable,
        scan_codes=scan_codes,
        attendance=InMemoryAttendance(modules=academics, timetable=timetable),
        justifications=InMemoryJustifications(modules=academics),
        notifications=InMemoryNotifications(),
    )


@pytest.fixture
def clock(fixed_now):
    state = SimpleNamespace(now=fixed_now)

    def _now() -> datetime:
        return state.now

    _now.state = state
    return _now


@pytest.fixture
def container(repos, clock, tmp_path):
    return wire_container(
        users_repo=repos.users,
        sessions_repo=repos.sessions,
        academics_repo=repos.academics,
        timetable_repo=repos.timetable,
        scan_codes_repo=repos.scan_codes,
        attendance_repo=repos.attendance,
        justifications_repo=repos.justifications,
        notifications_repo=repos.notifications,
        upload_folder=str(tmp_path / "uploads"),
        demo_logins_enabled=True,
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Put a user into the cookie session without going through /api/auth/login."""

    def _login(user_id: str, user_type: str, **extra):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["user_type"] = user_type
            sess["name"] = extra.get("name", user_id)
            sess["level_id"] = extra.get("level_id")
            sess["specialization_id"] = extra.get("specialization_id")
            sess["group_id"] = extra.get("group_id")
            sess["session_id"] = extra.get("session_id", "test-session")
        return client

    return _login


@pytest.fixture
def student_client(login):
    return login("S1", "student", level_id=3, specialization_id=1, group_id=1)
