from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..common.validators import optional_int, optional_str, require_non_empty, require_positive_int
from ..core.exceptions import NotFoundError, ValidationError
from .model import Group, Level, Module, Specialization
from .repository import AcademicRepository

Cleaner = Callable[[Any], Any]


def _text(label: str) -> Cleaner:
    return lambda value: require_non_empty(value, label)


def _positive(label: str) -> Cleaner:
    return lambda value: require_positive_int(value, label)


def _non_negative(label: str) -> Cleaner:
    def clean(value: Any) -> int:
        number = optional_int(value) or 0
        if number < 0:
            raise ValidationError(f"{label} must not be negative")
        return number

    return clean


def _coefficient(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Coefficient is invalid") from None
    if number <= 0:
        raise ValidationError("Coefficient must be greater than 0")
    return number


def _max_students(value: Any) -> int:
    number = optional_int(value)
    if number is None or number <= 0:
        raise ValidationError("Max students must be greater than 0")
    return number


# field -> cleaner, plus the fields a create must provide
LEVEL_FIELDS: Dict[str, Cleaner] = {"name": _text("Name"), "code": _text("Code"), "description": optional_str}
LEVEL_REQUIRED: Tuple[str, ...] = ("name", "code")

SPECIALIZATION_FIELDS: Dict[str, Cleaner] = {
    "level_id": _positive("Level"),
    "name": _text("Name"),
    "name_ar": optional_str,
    "code": _text("Code"),
    "description": optional_str,
}
SPECIALIZATION_REQUIRED = ("level_id", "name", "code")

MODULE_FIELDS: Dict[str, Cleaner] = {
    "name": _text("Name"),
    "name_ar": optional_str,
    "code": _text("Code"),
    "module_type": optional_str,
    "lecture_hours": _non_negative("Lecture hours"),
    "practical_hours": _non_negative("Practical hours"),
    "td_hours": _non_negative("TD hours"),
    "coefficient": _coefficient,
    "credits": _non_negative("Credits"),
    "teacher_id": optional_str,
    "specialization_id": _positive("Specialization"),
    "semester_id": _positive("Semester"),
    "description": optional_str,
}
MODULE_REQUIRED = ("name", "code", "specialization_id", "semester_id")

GROUP_FIELDS: Dict[str, Cleaner] = {
    "name": _text("Name"),
    "level_id": _positive("Level"),
    "specialization_id": _positive("Specialization"),
    "academic_year_id": _positive("Academic year"),
    "max_students": _max_students,
}
GROUP_REQUIRED = ("name", "level_id", "specialization_id", "academic_year_id", "max_students")


def clean_fields(data: dict, cleaners: Dict[str, Cleaner], required: Sequence[str] = ()) -> dict:
    """Validate the known keys of ``data``; unknown keys are ignored."""
    for key in required:
        if data.get(key) in (None, ""):
            raise ValidationError(f"{key} is required")
    cleaned = {key: clean(data[key]) for key, clean in cleaners.items() if key in data}
    if not cleaned:
        raise ValidationError("Nothing to update")
    return cleaned


class AcademicService:
    """Use case: administer the academic structure."""

    def __init__(self, academics: AcademicRepository):
        self._academics = academics

    @staticmethod
    def _require_found(found: bool, label: str) -> None:
        if not found:
            raise NotFoundError(f"{label} not found")

    # Levels

    def list_levels(self) -> Sequence[Level]:
        return self._academics.list_levels()

    def create_level(self, data: dict) -> int:
        return self._academics.create_level(clean_fields(data, LEVEL_FIELDS, LEVEL_REQUIRED))

    def update_level(self, level_id: int, data: dict) -> None:
        self._require_found(self._academics.update_level(level_id, clean_fields(data, LEVEL_FIELDS)), "Level")

    def delete_level(self, level_id: int) -> None:
        self._require_found(self._academics.delete_level(level_id), "Level")

    # Specializations

    def list_specializations(self, level_id: Optional[int] = None) -> Sequence[Specialization]:
        return self._academics.list_specializations(level_id)

    def create_specialization(self, data: dict) -> int:
        return self._academics.create_specialization(
            clean_fields(data, SPECIALIZATION_FIELDS, SPECIALIZATION_REQUIRED)
        )

    def update_specialization(self, specialization_id: int, data: dict) -> None:
        fields = clean_fields(data, SPECIALIZATION_FIELDS)
        self._require_found(self._academics.update_specialization(specialization_id, fields), "Specialization")

    def delete_specialization(self, specialization_id: int) -> None:
        self._require_found(self._academics.delete_specialization(specialization_id), "Specialization")

    # Modules

    def list_modules(
        self, *, specialization_id: Optional[int] = None, semester_id: Optional[int] = None
    ) -> Sequence[Module]:
        return self._academics.list_modules(specialization_id=specialization_id, semester_id=semester_id)

    def create_module(self, data: dict) -> int:
        return self._academics.create_module(clean_fields(data, MODULE_FIELDS, MODULE_REQUIRED))

    def update_module(self, module_id: int, data: dict) -> None:
        self._require_found(self._academics.update_module(module_id, clean_fields(data, MODULE_FIELDS)), "Module")

    def delete_module(self, module_id: int) -> None:
        self._require_found(self._academics.delete_module(module_id), "Module")

    # Groups

    def list_groups(self, specialization_id: Optional[int] = None) -> Sequence[Group]:
        return self._academics.list_groups(specialization_id)

    def create_group(self, data: dict) -> int:
        return self._academics.create_group(clean_fields(data, GROUP_FIELDS, GROUP_REQUIRED))

    def update_group(self, group_id: int, data: dict) -> None:
        self._require_found(self._academics.update_group(group_id, clean_fields(data, GROUP_FIELDS)), "Group")

    def delete_group(self, group_id: int) -> None:
        self._require_found(self._academics.delete_group(group_id), "Group")
