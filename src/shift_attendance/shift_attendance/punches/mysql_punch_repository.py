from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import ensure_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, run_blocking
from .model import RawPunch
from .repository import PunchRepository


class MySQLPunchRepository(PunchRepository):
    """Reads device punches; ``log_time`` is stored as naive UTC."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def list_for_employee(self, *, employee_id: str, start: datetime, end: datetime) -> Sequence[RawPunch]:
        return await run_blocking(self._list_for_employee, employee_id, start, end)

    def _list_for_employee(self, employee_id: str, start: datetime, end: datetime) -> list[RawPunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT log_time
                FROM attendance_logs
                WHERE employee_id=%s AND log_time BETWEEN %s AND %s
                ORDER BY log_time
                """,
                (employee_id, _naive_utc(start), _naive_utc(end)),
            )
            return [RawPunch(employee_id=employee_id, log_time=r["log_time"]) for r in fetchall(cur)]


def _naive_utc(value: datetime) -> datetime:
    return ensure_utc(value).replace(tzinfo=None)
