from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Level:
    level_id: int
    name: str
    code: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Specialization:
    specialization_id: int
    level_id: int
    name: str
    code: str
    name_ar: Optional[str] = None
    description: Optional[str] = None
    level_name: Optional[str] = None


@dataclass(frozen=True)
class Semester:
    semester_id: int
    academic_year_id: int
    name: str
    start_date: date
    end_date: date
    is_current: bool = False


@dataclass(frozen=True)
class Module:
    """Teaching unit of a specialization in one semester."""

    module_id: int
    name: str
    code: str
    specialization_id: int
    semester_id: int
    name_ar: Optional[str] = None
    module_type: str = "fundamental"
    lecture_hours: int = 0
    practical_hours: int = 0
    td_hours: int = 0
    coefficient: float = 1.0
    credits: int = 1
    teacher_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Group:
    group_id: int
    name: str
    level_id: int
    specialization_id: int
    academic_year_id: int
    max_students: int = 30
    student_count: int = 0
