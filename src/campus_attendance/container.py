from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .academics.mysql_academic_repository import MySQLAcademicRepository
from .academics.service import AcademicService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_scan_code_repository import MySQLScanCodeRepository
from .attendance.scan_codes import ScanCodeService
from .attendance.service import AttendanceHistoryService, CheckInService
from .core.constants import DEFAULT_SCAN_CODE_TTL_MINUTES
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .justifications.mysql_justification_repository import MySQLJustificationRepository
from .justifications.service import JustificationService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.service import TimetableService
from .users.mysql_user_repository import MySQLSessionRepository, MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    # Repositories are typed loosely so tests can wire in-memory fakes.
    users_repo: Any
    sessions_repo: Any
    academics_repo: Any
    timetable_repo: Any
    scan_codes_repo: Any
    attendance_repo: Any
    justifications_repo: Any
    notifications_repo: Any

    auth_service: AuthService
    user_service: UserService
    academic_service: AcademicService
    timetable_service: TimetableService
    check_in_service: CheckInService
    attendance_history_service: AttendanceHistoryService
    scan_code_service: ScanCodeService
    notification_service: NotificationService
    justification_service: JustificationService
    dashboard_service: DashboardService


def wire_container(
    *,
    users_repo,
    sessions_repo,
    academics_repo,
    timetable_repo,
    scan_codes_repo,
    attendance_repo,
    justifications_repo,
    notifications_repo,
    upload_folder: str = "uploads",
    scan_code_ttl_minutes: int = DEFAULT_SCAN_CODE_TTL_MINUTES,
    demo_logins_enabled: bool = False,
    clock=None,
) -> Container:
    """Build the services on top of any set of repositories."""
    clock_kw = {"clock": clock} if clock else {}

    timetable_service = TimetableService(timetable_repo, academics_repo, **clock_kw)
    notification_service = NotificationService(notifications_repo, **clock_kw)

    return Container(
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        academics_repo=academics_repo,
        timetable_repo=timetable_repo,
        scan_codes_repo=scan_codes_repo,
        attendance_repo=attendance_repo,
        justifications_repo=justifications_repo,
        notifications_repo=notifications_repo,
        auth_service=AuthService(users_repo, sessions_repo, demo_logins_enabled=demo_logins_enabled, **clock_kw),
        user_service=UserService(users_repo),
        academic_service=AcademicService(academics_repo),
        timetable_service=timetable_service,
        check_in_service=CheckInService(scan_codes_repo, attendance_repo, timetable_repo, **clock_kw),
        attendance_history_service=AttendanceHistoryService(attendance_repo),
        scan_code_service=ScanCodeService(
            scan_codes_repo, timetable_repo, ttl_minutes=scan_code_ttl_minutes, **clock_kw
        ),
        notification_service=notification_service,
        justification_service=JustificationService(
            justifications_repo,
            attendance_repo,
            academics_repo,
            notification_service,
            upload_folder=upload_folder,
            **clock_kw,
        ),
        dashboard_service=DashboardService(
            users=users_repo,
            academics=academics_repo,
            attendance=attendance_repo,
            justifications=justifications_repo,
            notifications=notifications_repo,
            timetable=timetable_service,
        ),
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        users_repo=MySQLUserRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        academics_repo=MySQLAcademicRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        scan_codes_repo=MySQLScanCodeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        justifications_repo=MySQLJustificationRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        **options,
    )
