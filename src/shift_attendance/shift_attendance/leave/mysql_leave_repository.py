from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, run_blocking
from .model import LeaveRecord
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def list_approved(self, *, employee_id: str, start: date, end: date) -> Sequence[LeaveRecord]:
        return await run_blocking(self._list_approved, employee_id, start, end)

    def _list_approved(self, employee_id: str, start: date, end: date) -> list[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Overlap test: the leave starts before the range ends and ends after it starts.
            cur.execute(
                """
                SELECT start_date, end_date, status
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                """,
                (employee_id, LeaveStatus.APPROVED.value, end, start),
            )
            return [
                LeaveRecord(
                    employee_id=employee_id,
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    status=LeaveStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
