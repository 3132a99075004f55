from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group, Level, Module, Semester, Specialization


class AcademicRepository(Protocol):
    """Levels, specializations, semesters, modules and groups.

    create_* returns the new id; update_*/delete_* return False when no row matched.
    """

    def list_levels(self) -> Sequence[Level]:
        raise NotImplementedError

    def create_level(self, fields: dict) -> int:
        """Insert a level; raises DuplicateRecordError when its code is taken."""
        raise NotImplementedError

    def update_level(self, level_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete_level(self, level_id: int) -> bool:
        raise NotImplementedError

    def get_specialization(self, specialization_id: int) -> Optional[Specialization]:
        raise NotImplementedError

    def list_specializations(self, level_id: Optional[int] = None) -> Sequence[Specialization]:
        raise NotImplementedError

    def create_specialization(self, fields: dict) -> int:
        raise NotImplementedError

    def update_specialization(self, specialization_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete_specialization(self, specialization_id: int) -> bool:
        raise NotImplementedError

    def get_current_semester(self) -> Optional[Semester]:
        raise NotImplementedError

    def get_module(self, module_id: int) -> Optional[Module]:
        raise NotImplementedError

    def list_modules(
        self,
        *,
        specialization_id: Optional[int] = None,
        semester_id: Optional[int] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[Module]:
        raise NotImplementedError

    def create_module(self, fields: dict) -> int:
        raise NotImplementedError

    def update_module(self, module_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete_module(self, module_id: int) -> bool:
        raise NotImplementedError

    def list_groups(self, specialization_id: Optional[int] = None) -> Sequence[Group]:
        raise NotImplementedError

    def create_group(self, fields: dict) -> int:
        raise NotImplementedError

    def update_group(self, group_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete_group(self, group_id: int) -> bool:
        raise NotImplementedError
