from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from ..common.datetime_utils import ONE_DAY, ensure_utc, utc_midnight, utc_now
from ..common.validators import require_date_range, require_non_empty
from ..core.constants import PUNCH_LOOKAHEAD_DAYS, PUNCH_LOOKBACK_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import DataSourceError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..punches.parser import parse_punches
from ..punches.repository import PunchRepository
from ..schedules.model import WeeklySchedulePattern, first_grace_override
from ..schedules.repository import ScheduleRepository
from ..settings.model import EngineSettings, OrganizationSettings
from ..settings.repository import SettingsRepository
from ..settings.service import resolve_grace_minutes
from .engine import AttendanceEngine, ComputationInput
from .model import DailyAttendanceResult, TraceEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AttendanceService:
    """Loads one employee's data and runs the attendance engine over a date range."""

    def __init__(
        self,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        leave: LeaveRepository,
        punches: PunchRepository,
        settings: SettingsRepository,
        *,
        engine_settings: Optional[EngineSettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._employees = employees
        self._schedules = schedules
        self._leave = leave
        self._punches = punches
        self._settings = settings
        self._engine_settings = engine_settings or EngineSettings()
        self._clock = clock

    async def compute_range(
        self,
        employee_id: str,
        start: date,
        end: date,
        *,
        now: Optional[datetime] = None,
    ) -> list[DailyAttendanceResult]:
        """One result per date in ``[start, end]`` (or a single terminal row)."""

        employee_id = require_non_empty(employee_id, "employee_id")
        require_date_range(start, end)
        now = ensure_utc(now) if now is not None else self._clock()

        employee = await self._employees.get_by_id(employee_id)
        if employee is None:
            logger.info("employee %s not found", employee_id)
            return [DailyAttendanceResult.empty(employee_id, start, AttendanceStatus.EMPLOYEE_NOT_FOUND)]

        patterns = await self._load_patterns(employee)
        if not patterns:
            logger.info("employee %s has no schedule assigned", employee_id)
            return [DailyAttendanceResult.empty(employee_id, start, AttendanceStatus.NO_SCHEDULE_ASSIGNED)]

        organization = await self._organization_settings()
        grace = await self._grace_minutes(employee, patterns, organization)

        degraded: list[TraceEvent] = []
        exceptions = await self._degrade(
            self._schedules.list_exceptions(employee_id=employee_id, start=start - ONE_DAY, end=end),
            "schedule exceptions",
            degraded,
        )
        leave = await self._degrade(
            self._leave.list_approved(employee_id=employee_id, start=start, end=end),
            "leave records",
            degraded,
        )

        raw_punches = await self._punches.list_for_employee(
            employee_id=employee_id,
            start=utc_midnight(start - ONE_DAY * PUNCH_LOOKBACK_DAYS),
            end=utc_midnight(end + ONE_DAY * PUNCH_LOOKAHEAD_DAYS),
        )
        punches = parse_punches(raw_punches)

        engine = AttendanceEngine(self._engine_settings.working_day_policy(organization))
        results = engine.compute(
            ComputationInput(
                employee_id=employee_id,
                start=start,
                end=end,
                patterns=patterns,
                exceptions=exceptions,
                leave=leave,
                punches=punches,
                grace_minutes=grace,
                now=now,
            )
        )
        logger.debug("employee %s: %d results for %s..%s", employee_id, len(results), start, end)
        return [result.with_trace(degraded) for result in results]

    async def _load_patterns(self, employee: Employee) -> Sequence[WeeklySchedulePattern]:
        pattern_ids = employee.assigned_pattern_ids
        if not pattern_ids:
            return []
        return list(await self._schedules.get_patterns(pattern_ids))

    async def _organization_settings(self) -> Optional[OrganizationSettings]:
        try:
            return await self._settings.get_organization_settings()
        except DataSourceError as exc:
            logger.warning("organization settings unavailable, using configured defaults: %s", exc)
            return None

    async def _grace_minutes(
        self,
        employee: Employee,
        patterns: Sequence[WeeklySchedulePattern],
        organization: Optional[OrganizationSettings],
    ) -> int:
        override = first_grace_override(patterns)
        organization_default = organization.default_grace_minutes if organization else None

        department_grace = None
        if override is None and organization_default is None and employee.department_id is not None:
            try:
                department_grace = await self._settings.get_department_grace_minutes(employee.department_id)
            except DataSourceError as exc:
                logger.warning("department grace for %s unavailable: %s", employee.department_id, exc)

        return resolve_grace_minutes(
            schedule_override=override,
            organization_default=organization_default,
            department_grace=department_grace,
            fallback=self._engine_settings.default_grace_minutes,
        )

    @staticmethod
    async def _degrade(pending: Awaitable[Sequence[T]], what: str, degraded: list[TraceEvent]) -> Sequence[T]:
        """Optional inputs: a failed fetch is logged and treated as empty."""

        try:
            return list(await pending)
        except DataSourceError as exc:
            logger.warning("could not load %s, continuing without them: %s", what, exc)
            degraded.append(TraceEvent("degraded", f"{what} unavailable"))
            return []
