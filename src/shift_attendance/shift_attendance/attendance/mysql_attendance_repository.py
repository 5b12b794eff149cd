from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import LocalTime, ensure_utc
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time, run_blocking
from .model import DailyAttendanceResult
from .repository import AttendanceCacheRepository

_COLUMNS = """
    employee_id, date, status, in_time, out_time, duration_hours, regular_hours, overtime_hours,
    shift_name, shift_start_time, shift_end_time
"""


def _hours(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _instant(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value) if value is not None else None


def _local_time(value: Any) -> Optional[LocalTime]:
    parsed = normalize_mysql_time(value)
    return LocalTime.from_time(parsed) if parsed else None


def row_to_result(row: Mapping[str, Any]) -> DailyAttendanceResult:
    return DailyAttendanceResult(
        employee_id=str(row["employee_id"]),
        date=row["date"],
        status=AttendanceStatus(row["status"]),
        in_time=_instant(row.get("in_time")),
        out_time=_instant(row.get("out_time")),
        duration_hours=_hours(row.get("duration_hours")),
        regular_hours=_hours(row.get("regular_hours")),
        overtime_hours=_hours(row.get("overtime_hours")),
        shift_name=row.get("shift_name"),
        shift_start=_local_time(row.get("shift_start_time")),
        shift_end=_local_time(row.get("shift_end_time")),
    )


def result_to_params(result: DailyAttendanceResult) -> tuple:
    def naive(value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value).replace(tzinfo=None) if value is not None else None

    return (
        result.employee_id,
        result.date,
        result.status.value,
        naive(result.in_time),
        naive(result.out_time),
        result.duration_hours,
        result.regular_hours,
        result.overtime_hours,
        result.shift_name,
        result.shift_start.to_time() if result.shift_start else None,
        result.shift_end.to_time() if result.shift_end else None,
    )


class MySQLAttendanceRepository(AttendanceCacheRepository):
    """``daily_attendance_calculations``: one row per ``(employee_id, date)``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_for_date(self, work_date: date, employee_ids: Sequence[str]) -> Mapping[str, DailyAttendanceResult]:
        if not employee_ids:
            return {}
        return await run_blocking(self._get_for_date, work_date, list(employee_ids))

    async def upsert(self, result: DailyAttendanceResult) -> None:
        await run_blocking(self._upsert, result)

    async def list_range(self, *, start: date, end: date) -> Sequence[DailyAttendanceResult]:
        return await run_blocking(self._list_range, start, end)

    def _get_for_date(self, work_date: date, employee_ids: list[str]) -> dict[str, DailyAttendanceResult]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance_calculations
                WHERE date=%s AND employee_id IN ({in_clause(employee_ids)})
                """,
                (work_date, *employee_ids),
            )
            rows = [row_to_result(r) for r in fetchall(cur)]
            return {r.employee_id: r for r in rows}

    def _upsert(self, result: DailyAttendanceResult) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO daily_attendance_calculations({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    in_time=VALUES(in_time),
                    out_time=VALUES(out_time),
                    duration_hours=VALUES(duration_hours),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    shift_name=VALUES(shift_name),
                    shift_start_time=VALUES(shift_start_time),
                    shift_end_time=VALUES(shift_end_time)
                """,
                result_to_params(result),
            )

    def _list_range(self, start: date, end: date) -> list[DailyAttendanceResult]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_attendance_calculations
                WHERE date BETWEEN %s AND %s
                ORDER BY date, employee_id
                """,
                (start, end),
            )
            return [row_to_result(r) for r in fetchall(cur)]
