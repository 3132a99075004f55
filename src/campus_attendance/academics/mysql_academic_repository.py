from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_date
from .model import Group, Level, Module, Semester, Specialization
from .repository import AcademicRepository

_LEVEL_COLUMNS = ("name", "code", "description")
_SPECIALIZATION_COLUMNS = ("level_id", "name", "name_ar", "code", "description")
_MODULE_COLUMNS = (
    "name",
    "name_ar",
    "code",
    "module_type",
    "lecture_hours",
    "practical_hours",
    "td_hours",
    "coefficient",
    "credits",
    "teacher_id",
    "specialization_id",
    "semester_id",
    "description",
)
_GROUP_COLUMNS = ("name", "level_id", "specialization_id", "academic_year_id", "max_students")


def _row_to_specialization(row: dict) -> Specialization:
    return Specialization(
        specialization_id=int(row["specialization_id"]),
        level_id=int(row["level_id"]),
        name=row["name"],
        code=row["code"],
        name_ar=row.get("name_ar"),
        description=row.get("description"),
        level_name=row.get("level_name"),
    )


def _row_to_module(row: dict) -> Module:
    return Module(
        module_id=int(row["module_id"]),
        name=row["name"],
        code=row["code"],
        specialization_id=int(row["specialization_id"]),
        semester_id=int(row["semester_id"]),
        name_ar=row.get("name_ar"),
        module_type=row.get("module_type") or "fundamental",
        lecture_hours=int(row.get("lecture_hours") or 0),
        practical_hours=int(row.get("practical_hours") or 0),
        td_hours=int(row.get("td_hours") or 0),
        coefficient=float(row.get("coefficient") or 0),
        credits=int(row.get("credits") or 0),
        teacher_id=row.get("teacher_id"),
        description=row.get("description"),
    )


class MySQLAcademicRepository(AcademicRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # Generic writes; column names come from the whitelists above, values are bound.

    def _insert(self, table: str, allowed: Sequence[str], fields: dict) -> int:
        columns = [c for c in allowed if c in fields]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO {table}({', '.join(columns)}) VALUES({', '.join(['%s'] * len(columns))})",
                    tuple(fields[c] for c in columns),
                )
                return int(cur.lastrowid)
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError("A record with the same code already exists") from e
            raise

    def _update(self, table: str, key: str, key_value: int, allowed: Sequence[str], fields: dict) -> bool:
        columns = [c for c in allowed if c in fields]
        if not columns:
            return False
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE {table} SET {', '.join(f'{c}=%s' for c in columns)} WHERE {key}=%s",
                    tuple(fields[c] for c in columns) + (key_value,),
                )
                return cur.rowcount > 0
        except mysql_errors.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateRecordError("A record with the same code already exists") from e
            raise

    def _delete(self, table: str, key: str, key_value: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {table} WHERE {key}=%s", (key_value,))
            return cur.rowcount > 0

    def list_levels(self) -> Sequence[Level]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT level_id, name, code, description FROM levels ORDER BY level_id")
            return [
                Level(level_id=int(r["level_id"]), name=r["name"], code=r["code"], description=r.get("description"))
                for r in fetchall(cur)
            ]

    def create_level(self, fields: dict) -> int:
        return self._insert("levels", _LEVEL_COLUMNS, fields)

    def update_level(self, level_id: int, fields: dict) -> bool:
        return self._update("levels", "level_id", level_id, _LEVEL_COLUMNS, fields)

    def delete_level(self, level_id: int) -> bool:
        return self._delete("levels", "level_id", level_id)

    def get_specialization(self, specialization_id: int) -> Optional[Specialization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.specialization_id, s.level_id, s.name, s.name_ar, s.code, s.description,
                       l.name AS level_name
                FROM specializations s
                JOIN levels l ON l.level_id = s.level_id
                WHERE s.specialization_id=%s
                """,
                (specialization_id,),
            )
            row = fetchone(cur)
            return _row_to_specialization(row) if row else None

    def list_specializations(self, level_id: Optional[int] = None) -> Sequence[Specialization]:
        sql = """
            SELECT s.specialization_id, s.level_id, s.name, s.name_ar, s.code, s.description,
                   l.name AS level_name
            FROM specializations s
            JOIN levels l ON l.level_id = s.level_id
        """
        params: tuple = ()
        if level_id is not None:
            sql += " WHERE s.level_id=%s"
            params = (level_id,)
        sql += " ORDER BY s.level_id, s.name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_specialization(r) for r in fetchall(cur)]

    def create_specialization(self, fields: dict) -> int:
        return self._insert("specializations", _SPECIALIZATION_COLUMNS, fields)

    def update_specialization(self, specialization_id: int, fields: dict) -> bool:
        return self._update(
            "specializations", "specialization_id", specialization_id, _SPECIALIZATION_COLUMNS, fields
        )

    def delete_specialization(self, specialization_id: int) -> bool:
        return self._delete("specializations", "specialization_id", specialization_id)

    def get_current_semester(self) -> Optional[Semester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT semester_id, academic_year_id, name, start_date, end_date, is_current
                FROM semesters
                WHERE is_current=1
                ORDER BY start_date DESC
                LIMIT 1
                """
            )
            row = fetchone(cur)
            if not row:
                return None
            return Semester(
                semester_id=int(row["semester_id"]),
                academic_year_id=int(row["academic_year_id"]),
                name=row["name"],
                start_date=normalize_mysql_date(row["start_date"]),
                end_date=normalize_mysql_date(row["end_date"]),
                is_current=bool(row["is_current"]),
            )

    def get_module(self, module_id: int) -> Optional[Module]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM modules WHERE module_id=%s", (module_id,))
            row = fetchone(cur)
            return _row_to_module(row) if row else None

    def list_modules(
        self,
        *,
        specialization_id: Optional[int] = None,
        semester_id: Optional[int] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[Module]:
        clauses = []
        params: list = []
        if specialization_id is not None:
            clauses.append("specialization_id=%s")
            params.append(specialization_id)
        if semester_id is not None:
            clauses.append("semester_id=%s")
            params.append(semester_id)
        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(teacher_id)

        sql = "SELECT * FROM modules"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_module(r) for r in fetchall(cur)]

    def create_module(self, fields: dict) -> int:
        return self._insert("modules", _MODULE_COLUMNS, fields)

    def update_module(self, module_id: int, fields: dict) -> bool:
        return self._update("modules", "module_id", module_id, _MODULE_COLUMNS, fields)

    def delete_module(self, module_id: int) -> bool:
        return self._delete("modules", "module_id", module_id)

    def list_groups(self, specialization_id: Optional[int] = None) -> Sequence[Group]:
        sql = """
            SELECT g.group_id, g.name, g.level_id, g.specialization_id, g.academic_year_id, g.max_students,
                   COUNT(u.user_id) AS student_count
            FROM student_groups g
            LEFT JOIN users u ON u.group_id = g.group_id AND u.user_type = 'student'
        """
        params: tuple = ()
        if specialization_id is not None:
            sql += " WHERE g.specialization_id=%s"
            params = (specialization_id,)
        sql += """
            GROUP BY g.group_id, g.name, g.level_id, g.specialization_id, g.academic_year_id, g.max_students
            ORDER BY g.name
        """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [
                Group(
                    group_id=int(r["group_id"]),
                    name=r["name"],
                    level_id=int(r["level_id"]),
                    specialization_id=int(r["specialization_id"]),
                    academic_year_id=int(r["academic_year_id"]),
                    max_students=int(r["max_students"]),
                    student_count=int(r.get("student_count") or 0),
                )
                for r in fetchall(cur)
            ]

    def create_group(self, fields: dict) -> int:
        return self._insert("student_groups", _GROUP_COLUMNS, fields)

    def update_group(self, group_id: int, fields: dict) -> bool:
        return self._update("student_groups", "group_id", group_id, _GROUP_COLUMNS, fields)

    def delete_group(self, group_id: int) -> bool:
        return self._delete("student_groups", "group_id", group_id)
