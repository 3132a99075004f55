from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Account type used for role-based access."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    TECH_ADMIN = "tech-admin"

    @property
    def is_admin(self) -> bool:
        return self in {UserType.ADMIN, UserType.TECH_ADMIN}


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class JustificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SessionType(str, Enum):
    """Kind of scheduled session: lecture, tutorial or lab."""

    COURS = "COURS"
    TD = "TD"
    TP = "TP"
