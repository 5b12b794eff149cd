from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import LocalTime
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time, run_blocking
from .model import ScheduleException, WeeklySchedulePattern
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def row_to_pattern(row: Mapping[str, Any]) -> Optional[WeeklySchedulePattern]:
    """Pattern from a ``time_zones`` row; ``None`` (logged) when the device string is malformed."""

    grace = row.get("buffer_time_minutes")
    try:
        return WeeklySchedulePattern.from_tz_string(
            int(row["id"]),
            row.get("name") or f"Schedule {row['id']}",
            (row.get("tz_string") or "").strip(),
            grace_minutes=int(grace) if grace is not None else None,
        )
    except ValidationError as exc:
        logger.warning("skipping schedule pattern %s: %s", row.get("id"), exc)
        return None


def _local_time(value: Any) -> Optional[LocalTime]:
    parsed = normalize_mysql_time(value)
    return LocalTime.from_time(parsed) if parsed else None


def row_to_exception(employee_id: str, row: Mapping[str, Any]) -> ScheduleException:
    return ScheduleException(
        employee_id=employee_id,
        date=row["date"],
        is_day_off=bool(row.get("is_day_off")),
        is_half_day=bool(row.get("is_half_day")),
        start_time=_local_time(row.get("start_time")),
        end_time=_local_time(row.get("end_time")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_patterns(self, pattern_ids: Sequence[int]) -> Sequence[WeeklySchedulePattern]:
        if not pattern_ids:
            return []
        return await run_blocking(self._get_patterns, list(pattern_ids))

    async def list_exceptions(self, *, employee_id: str, start: date, end: date) -> Sequence[ScheduleException]:
        return await run_blocking(self._list_exceptions, employee_id, start, end)

    def _get_patterns(self, pattern_ids: list[int]) -> list[WeeklySchedulePattern]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, name, tz_string, buffer_time_minutes
                FROM time_zones
                WHERE id IN ({in_clause(pattern_ids)})
                """,
                tuple(pattern_ids),
            )
            by_id = {int(r["id"]): r for r in fetchall(cur)}

        patterns = []
        for pattern_id in pattern_ids:
            row = by_id.get(int(pattern_id))
            pattern = row_to_pattern(row) if row else None
            if pattern is not None:
                patterns.append(pattern)
        return patterns

    def _list_exceptions(self, employee_id: str, start: date, end: date) -> list[ScheduleException]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT date, start_time, end_time, is_day_off, is_half_day
                FROM schedule_exceptions
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date
                """,
                (employee_id, start, end),
            )
            return [row_to_exception(employee_id, r) for r in fetchall(cur)]
