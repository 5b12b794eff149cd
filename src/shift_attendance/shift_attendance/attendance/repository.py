from __future__ import annotations

from datetime import date
from typing import Mapping, Protocol, Sequence

from .model import DailyAttendanceResult


class AttendanceCacheRepository(Protocol):
    """Persisted results keyed by ``(employee_id, date)``."""

    async def get_for_date(self, work_date: date, employee_ids: Sequence[str]) -> Mapping[str, DailyAttendanceResult]:
        raise NotImplementedError

    async def upsert(self, result: DailyAttendanceResult) -> None:
        """Insert or overwrite the whole row for ``(employee_id, date)``."""

        raise NotImplementedError

    async def list_range(self, *, start: date, end: date) -> Sequence[DailyAttendanceResult]:
        raise NotImplementedError
