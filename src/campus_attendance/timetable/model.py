from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_time_range
from ..core.enums import SessionType


@dataclass(frozen=True)
class TimetableEntry:
    """A recurring weekly session; group_id None means every group of the module."""

    timetable_id: int
    module_id: int
    day_of_week: int
    start_time: time
    end_time: time
    room: str
    teacher_id: str
    session_type: SessionType
    group_id: Optional[int] = None
    module_name: Optional[str] = None
    module_code: Optional[str] = None
    teacher_name: Optional[str] = None

    @property
    def time_range(self) -> str:
        return format_time_range(self.start_time, self.end_time)
