from __future__ import annotations

from .base import PayrollCalculator
from ...attendance.model import DailyAttendanceResult
from ...core.enums import AttendanceStatus


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: every day that is not Absent counts; hours are taken as computed."""

    def is_worked_day(self, row: DailyAttendanceResult) -> bool:
        return row.status != AttendanceStatus.ABSENT and not row.status.is_terminal

    def payable_hours(self, row: DailyAttendanceResult) -> tuple[float, float, float]:
        return (
            max(row.regular_hours, 0.0),
            max(row.overtime_hours, 0.0),
            max(row.duration_hours, 0.0),
        )
