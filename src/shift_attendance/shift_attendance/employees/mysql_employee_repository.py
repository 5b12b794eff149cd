from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, run_blocking
from .model import Employee
from .repository import EmployeeRepository

_SELECT_EMPLOYEE = """
    SELECT e.id, e.full_name, e.department_id, d.name AS department_name, e.is_active,
           e.individual_tz_1, e.individual_tz_2, e.individual_tz_3,
           s.tz_id_1, s.tz_id_2, s.tz_id_3
    FROM employees e
    LEFT JOIN departments d ON d.id = e.department_id
    LEFT JOIN schedules s ON s.department_id = e.department_id
"""


def _ids(row: Mapping[str, Any], *columns: str) -> tuple[int, ...]:
    return tuple(int(row[c]) for c in columns if row.get(c) is not None)


def row_to_employee(row: Mapping[str, Any]) -> Employee:
    return Employee(
        employee_id=str(row["id"]),
        full_name=row.get("full_name") or "",
        department_id=row.get("department_id"),
        department_name=row.get("department_name"),
        individual_pattern_ids=_ids(row, "individual_tz_1", "individual_tz_2", "individual_tz_3"),
        department_pattern_ids=_ids(row, "tz_id_1", "tz_id_2", "tz_id_3"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return await run_blocking(self._get_by_id, employee_id)

    async def list_active(self) -> Sequence[Employee]:
        return await run_blocking(self._list_active)

    def _get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " WHERE e.id=%s", (employee_id,))
            row = fetchone(cur)
            return row_to_employee(row) if row else None

    def _list_active(self) -> list[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EMPLOYEE + " WHERE e.is_active=1 ORDER BY e.full_name, e.id")
            return [row_to_employee(r) for r in fetchall(cur)]
