from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.model import DailyAttendanceResult
from ..attendance.service import AttendanceService
from ..common.datetime_utils import round_hours
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_PAYROLL_CONCURRENCY
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollSummaryRow

logger = logging.getLogger(__name__)


class PayrollSummaryService:
    """Per-employee totals over a date range, computed from daily attendance."""

    def __init__(
        self,
        attendance: AttendanceService,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        concurrency: int = DEFAULT_PAYROLL_CONCURRENCY,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._concurrency = max(1, int(concurrency))

    async def build_summary(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[PayrollSummaryRow]:
        require_date_range(start, end)
        employees = await self._roster(employee_id)

        semaphore = asyncio.Semaphore(self._concurrency)
        summaries = await asyncio.gather(*(self._summarize(e, start, end, now, semaphore) for e in employees))

        rows = [s for s in summaries if s is not None]
        rows.sort(key=lambda r: (r.employee_name.lower(), r.employee_id))
        return rows

    def summarize_rows(self, employee: Employee, daily: Sequence[DailyAttendanceResult]) -> PayrollSummaryRow:
        regular = overtime = total = 0.0
        days = 0
        for row in daily:
            if self._calculator.is_worked_day(row):
                days += 1
            r, o, t = self._calculator.payable_hours(row)
            regular += r
            overtime += o
            total += t

        return PayrollSummaryRow(
            employee_id=employee.employee_id,
            employee_name=employee.display_name,
            department_name=employee.department_name,
            total_days_worked=days,
            total_regular_hours=round_hours(regular),
            total_overtime_hours=round_hours(overtime),
            total_hours_worked=round_hours(total),
        )

    async def _roster(self, employee_id: Optional[str]) -> list[Employee]:
        if employee_id:
            employee = await self._employees.get_by_id(employee_id)
            return [employee] if employee else []
        return list(await self._employees.list_active())

    async def _summarize(
        self,
        employee: Employee,
        start: date,
        end: date,
        now: Optional[datetime],
        semaphore: asyncio.Semaphore,
    ) -> Optional[PayrollSummaryRow]:
        async with semaphore:
            try:
                daily = await self._attendance.compute_range(employee.employee_id, start, end, now=now)
            except Exception:
                logger.exception("payroll: attendance failed for employee %s", employee.employee_id)
                return None
        return self.summarize_rows(employee, daily)
