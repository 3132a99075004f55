from __future__ import annotations

from datetime import datetime

import pytest

from campus_attendance.core.constants import TECH_ADMIN_ID, TECH_ADMIN_PASSWORD
from campus_attendance.core.enums import UserType
from campus_attendance.core.exceptions import AuthenticationError, ValidationError
from campus_attendance.users.service import AuthService


def _auth(repos, fixed_now, *, demo=True) -> AuthService:
    return AuthService(repos.users, repos.sessions, demo_logins_enabled=demo, clock=lambda: fixed_now)


def test_regular_login_creates_session(repos, fixed_now):
    s_user = _auth(repos, fixed_now).login("S1", "secret1", "student")

    assert s_user.user_type == UserType.STUDENT
    assert s_user.specialization_id == 1
    assert s_user.group_id == 1
    stored = repos.sessions.get_session(s_user.session_id)
    assert stored.user_id == "S1"
    assert stored.expires_at == datetime(2024, 1, 22, 9, 0)


@pytest.mark.parametrize(
    "user_id,password,user_type",
    [("S1", "wrong", "student"), ("S1", "secret1", "teacher"), ("NOBODY", "secret1", "student")],
)
def test_bad_credentials(repos, fixed_now, user_id, password, user_type):
    with pytest.raises(AuthenticationError):
        _auth(repos, fixed_now).login(user_id, password, user_type)


def test_inactive_user_cannot_login(repos, fixed_now):
    repos.users.update_user("S1", {"is_active": 0})
    with pytest.raises(AuthenticationError):
        _auth(repos, fixed_now).login("S1", "secret1", "student")


def test_placeholder_hash_never_matches(repos, fixed_now):
    repos.users.update_user("T1", {"password_hash": "CHANGE_ME"})
    with pytest.raises(AuthenticationError):
        _auth(repos, fixed_now).login("T1", "CHANGE_ME", "teacher")


@pytest.mark.parametrize("missing", ["id", "password", "user_type"])
def test_missing_fields(repos, fixed_now, missing):
    args = {"id": "S1", "password": "secret1", "user_type": "student"}
    args[missing] = ""
    with pytest.raises(ValidationError):
        _auth(repos, fixed_now).login(args["id"], args["password"], args["user_type"])


def test_tech_admin_account_is_created_on_first_login(repos, fixed_now):
    s_user = _auth(repos, fixed_now).login(TECH_ADMIN_ID, TECH_ADMIN_PASSWORD, "tech-admin")

    assert s_user.user_type == UserType.TECH_ADMIN
    created = repos.users.get_by_id(TECH_ADMIN_ID)
    assert created.user_type == UserType.TECH_ADMIN
    assert created.password_hash != TECH_ADMIN_PASSWORD


def test_demo_student_login(repos, fixed_now):
    s_user = _auth(repos, fixed_now).login("S12345", "password", "student")
    assert s_user.name == "Ahmed Benali"
    assert repos.users.get_by_id("S12345") is not None


def test_demo_logins_can_be_disabled(repos, fixed_now):
    with pytest.raises(AuthenticationError):
        _auth(repos, fixed_now, demo=False).login("S12345", "password", "student")


def test_demo_password_is_not_accepted_for_regular_users(repos, fixed_now):
    with pytest.raises(AuthenticationError):
        _auth(repos, fixed_now).login("S1", "password", "student")


def test_logout_removes_session(repos, fixed_now):
    auth = _auth(repos, fixed_now)
    s_user = auth.login("S1", "secret1", "student")
    auth.logout(s_user.session_id)
    assert repos.sessions.get_session(s_user.session_id) is None
