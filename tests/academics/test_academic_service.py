from __future__ import annotations

import pytest

from campus_attendance.academics.service import AcademicService
from campus_attendance.core.exceptions import DuplicateRecordError, NotFoundError, ValidationError


@pytest.fixture
def service(repos) -> AcademicService:
    return AcademicService(repos.academics)


def test_create_level_requires_name_and_code(service):
    with pytest.raises(ValidationError):
        service.create_level({"name": "Master 1"})
    with pytest.raises(ValidationError):
        service.create_level({"name": "  ", "code": "M1"})

    level_id = service.create_level({"name": "Master 1", "code": "M1", "ignored": "x"})
    assert any(level.level_id == level_id and level.code == "M1" for level in service.list_levels())


def test_specialization_needs_positive_level(service):
    with pytest.raises(ValidationError):
        service.create_specialization({"level_id": 0, "name": "AI", "code": "AI"})
    spec_id = service.create_specialization({"level_id": "3", "name": "AI", "code": "AI"})
    assert [s.name for s in service.list_specializations(3) if s.specialization_id == spec_id] == ["AI"]


def test_group_max_students_must_be_positive(service):
    data = {"name": "G3", "level_id": 3, "specialization_id": 1, "academic_year_id": 1, "max_students": 0}
    with pytest.raises(ValidationError):
        service.create_group(data)

    data["max_students"] = 25
    group_id = service.create_group(data)
    with pytest.raises(ValidationError):
        service.update_group(group_id, {"max_students": -1})
    service.update_group(group_id, {"max_students": 40})
    assert {g.group_id: g.max_students for g in service.list_groups()}[group_id] == 40


def test_module_create_and_update(service, repos):
    module_id = service.create_module(
        {"name": "Networks", "code": "NET303", "specialization_id": 1, "semester_id": 1, "coefficient": "2.5",
         "lecture_hours": "30", "teacher_id": "T1"}
    )
    module = repos.academics.get_module(module_id)
    assert module.coefficient == 2.5
    assert module.lecture_hours == 30

    with pytest.raises(ValidationError):
        service.update_module(module_id, {"td_hours": -4})
    with pytest.raises(ValidationError):
        service.update_module(module_id, {})


def test_missing_rows_are_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_level(999, {"name": "X"})
    with pytest.raises(NotFoundError):
        service.delete_group(999)


def test_level_code_must_be_unique(service):
    with pytest.raises(DuplicateRecordError) as excinfo:
        service.create_level({"name": "Duplicate", "code": "L3"})
    assert excinfo.value.status_code == 409
