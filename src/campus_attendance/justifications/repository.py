from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import JustificationStatus
from .model import Justification


class JustificationRepository(Protocol):
    def create(
        self,
        *,
        student_id: str,
        module_id: int,
        attendance_id: int,
        file_path: str,
        reason: Optional[str],
        submitted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, justification_id: int) -> Optional[Justification]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[dict]:
        """Newest first, with module and attendance info."""
        raise NotImplementedError

    def list_pending_for_teacher(self, teacher_id: str) -> Sequence[dict]:
        raise NotImplementedError

    def review(
        self,
        justification_id: int,
        *,
        status: JustificationStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        comments: Optional[str],
    ) -> bool:
        """Only a pending justification can be reviewed; returns False otherwise."""
        raise NotImplementedError

    def count_pending(self, *, student_id: Optional[str] = None, teacher_id: Optional[str] = None) -> int:
        raise NotImplementedError
