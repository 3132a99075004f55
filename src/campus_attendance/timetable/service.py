from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..academics.repository import AcademicRepository
from ..common.datetime_utils import format_hhmm, now_utc
from ..common.serialization import to_json
from ..core.constants import WEEK_DAYS
from ..core.exceptions import NotFoundError
from .model import TimetableEntry
from .repository import TimetableRepository


def entry_to_dict(entry: TimetableEntry) -> dict:
    return {
        "timetable_id": entry.timetable_id,
        "day_of_week": entry.day_of_week,
        "start_time": format_hhmm(entry.start_time),
        "end_time": format_hhmm(entry.end_time),
        "time": entry.time_range,
        "room": entry.room,
        "session_type": entry.session_type.value,
        "group_id": entry.group_id,
        "module": {"id": entry.module_id, "name": entry.module_name, "code": entry.module_code},
        "teacher": {"id": entry.teacher_id, "name": entry.teacher_name},
    }


def group_by_day(entries: Sequence[TimetableEntry]) -> Dict[str, List[dict]]:
    """Bucket entries under day keys "1" (Monday) .. "7" (Sunday), each sorted by start time."""
    by_day: Dict[str, List[dict]] = {day: [] for day in WEEK_DAYS}
    for entry in sorted(entries, key=lambda e: (e.day_of_week, e.start_time)):
        by_day[str(entry.day_of_week)].append(entry_to_dict(entry))
    return by_day


class TimetableService:
    """Use case: weekly timetable views for students and teachers."""

    def __init__(
        self,
        timetable: TimetableRepository,
        academics: AcademicRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._timetable = timetable
        self._academics = academics
        self._clock = clock

    def _student_entries(self, specialization_id: int, group_id: Optional[int]):
        specialization = self._academics.get_specialization(specialization_id)
        if not specialization:
            raise NotFoundError("Student specialization not found")
        semester = self._academics.get_current_semester()
        if not semester:
            raise NotFoundError("No current semester configured")

        modules = self._academics.list_modules(
            specialization_id=specialization_id, semester_id=semester.semester_id
        )
        entries = self._timetable.list_for_modules([m.module_id for m in modules], group_id=group_id)
        return specialization, semester, modules, entries

    def student_timetable(self, *, specialization_id: Optional[int], group_id: Optional[int]) -> dict:
        if not specialization_id:
            raise NotFoundError("Student specialization not found")

        specialization, semester, modules, entries = self._student_entries(specialization_id, group_id)
        return {
            "specialization": to_json(specialization),
            "current_semester": to_json(semester),
            "modules": to_json(list(modules)),
            "timetable": group_by_day(entries),
        }

    def teacher_timetable(self, teacher_id: str) -> dict:
        return {"timetable": group_by_day(self._timetable.list_for_teacher(teacher_id))}

    def _today(self) -> str:
        return str(self._clock().isoweekday())

    def student_today(self, *, specialization_id: Optional[int], group_id: Optional[int]) -> List[dict]:
        if not specialization_id:
            return []
        try:
            _, _, _, entries = self._student_entries(specialization_id, group_id)
        except NotFoundError:
            return []
        return group_by_day(entries)[self._today()]

    def teacher_today(self, teacher_id: str) -> List[dict]:
        return group_by_day(self._timetable.list_for_teacher(teacher_id))[self._today()]
