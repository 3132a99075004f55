from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import JustificationStatus


@dataclass(frozen=True)
class Justification:
    """Absence justification; file_path holds the reason text when nothing was uploaded."""

    justification_id: int
    student_id: str
    module_id: int
    attendance_id: int
    file_path: str
    status: JustificationStatus
    submitted_at: datetime
    reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    comments: Optional[str] = None
