from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimetableEntry


class TimetableRepository(Protocol):
    def get_entry(self, timetable_id: int) -> Optional[TimetableEntry]:
        raise NotImplementedError

    def list_for_modules(self, module_ids: Sequence[int], *, group_id: Optional[int] = None) -> Sequence[TimetableEntry]:
        """Entries of the given modules; with group_id, only that group's and group-less ones."""
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: str) -> Sequence[TimetableEntry]:
        raise NotImplementedError
