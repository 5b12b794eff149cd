from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PayrollSummaryRow:
    employee_id: str
    employee_name: str
    department_name: Optional[str]
    total_days_worked: int
    total_regular_hours: float
    total_overtime_hours: float
    total_hours_worked: float

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department_name": self.department_name,
            "total_days_worked": self.total_days_worked,
            "total_regular_hours": self.total_regular_hours,
            "total_overtime_hours": self.total_overtime_hours,
            "total_hours_worked": self.total_hours_worked,
        }
