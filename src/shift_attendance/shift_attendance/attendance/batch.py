from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import iter_dates
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_BATCH_CONCURRENCY
from ..core.enums import AttendanceStatus
from ..core.exceptions import DataSourceError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import BatchOutcome, CachedRangeReport, DailyAttendanceResult
from .repository import AttendanceCacheRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)


class BatchAttendanceService:
    """Attendance for a whole roster on one date, reusing cached rows where possible.

    Rows are only recomputed when missing from the cache or stale (a worked
    shift cached without the shift it was computed against). Recomputation
    runs concurrently but never with more than ``concurrency`` employees in
    flight.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        cache: AttendanceCacheRepository,
        employees: EmployeeRepository,
        *,
        concurrency: int = DEFAULT_BATCH_CONCURRENCY,
    ):
        self._attendance = attendance
        self._cache = cache
        self._employees = employees
        self._concurrency = max(1, int(concurrency))

    async def run_batch(
        self,
        work_date: date,
        roster: Optional[Sequence[Employee]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BatchOutcome:
        if roster is None:
            roster = await self._employees.list_active()
        employee_ids = [e.employee_id for e in roster]
        if not employee_ids:
            return BatchOutcome(rows=[], cached=0, calculated=0)

        cached = await self._read_cache(work_date, employee_ids)
        to_compute = [eid for eid in employee_ids if eid not in cached or cached[eid].is_stale]
        logger.info(
            "batch %s: %d employees, %d cached, %d to calculate",
            work_date,
            len(employee_ids),
            len(employee_ids) - len(to_compute),
            len(to_compute),
        )

        semaphore = asyncio.Semaphore(self._concurrency)
        computed = await asyncio.gather(*(self._compute_one(eid, work_date, now, semaphore) for eid in to_compute))
        fresh = {eid: row for eid, row in zip(to_compute, computed) if row is not None}

        rows = []
        for eid in employee_ids:
            row = cached.get(eid)
            if row is None or row.is_stale:
                # Fall back to the stale row, then to Absent, when computation failed.
                row = fresh.get(eid) or row or DailyAttendanceResult.empty(eid, work_date, AttendanceStatus.ABSENT)
            rows.append(row)

        return BatchOutcome(rows=rows, cached=len(employee_ids) - len(to_compute), calculated=len(fresh))

    async def compute_batch_for_date(
        self,
        work_date: date,
        roster: Optional[Sequence[Employee]] = None,
        *,
        now: Optional[datetime] = None,
    ) -> list[DailyAttendanceResult]:
        outcome = await self.run_batch(work_date, roster, now=now)
        return outcome.rows

    async def read_cached_range(self, start: date, end: date, *, today: date) -> CachedRangeReport:
        """Cached rows only; dates up to ``today`` with no row at all are reported missing."""

        require_date_range(start, end)
        rows = sorted(await self._cache.list_range(start=start, end=end), key=lambda r: (r.date, r.employee_id))
        present = {row.date for row in rows}
        missing = [day for day in iter_dates(start, min(end, today)) if day not in present]
        return CachedRangeReport(rows=rows, missing_dates=missing)

    async def _read_cache(self, work_date: date, employee_ids: Sequence[str]) -> Mapping[str, DailyAttendanceResult]:
        try:
            return await self._cache.get_for_date(work_date, employee_ids)
        except DataSourceError as exc:
            logger.warning("cache read for %s failed, recalculating everyone: %s", work_date, exc)
            return {}

    async def _compute_one(
        self,
        employee_id: str,
        work_date: date,
        now: Optional[datetime],
        semaphore: asyncio.Semaphore,
    ) -> Optional[DailyAttendanceResult]:
        async with semaphore:
            try:
                results = await self._attendance.compute_range(employee_id, work_date, work_date, now=now)
            except Exception:
                logger.exception("attendance calculation failed for employee %s on %s", employee_id, work_date)
                return None

        result = results[0] if results else None
        if result is None or result.status.is_terminal:
            return result

        try:
            await self._cache.upsert(result)
        except DataSourceError as exc:
            logger.warning("could not cache result for %s on %s: %s", employee_id, work_date, exc)
        return result
