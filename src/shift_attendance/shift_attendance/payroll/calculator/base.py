from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import DailyAttendanceResult


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def is_worked_day(self, row: DailyAttendanceResult) -> bool:
        raise NotImplementedError

    @abstractmethod
    def payable_hours(self, row: DailyAttendanceResult) -> tuple[float, float, float]:
        """``(regular, overtime, total)`` hours for one day."""

        raise NotImplementedError
