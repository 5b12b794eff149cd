from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import MAX_ASSIGNED_PATTERNS


@dataclass(frozen=True)
class Employee:
    """Roster entry with the schedule patterns assigned to the employee.

    Individual overrides take priority; department patterns apply only when the
    employee has none of their own.
    """

    employee_id: str
    full_name: str = ""
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    individual_pattern_ids: tuple[int, ...] = ()
    department_pattern_ids: tuple[int, ...] = ()
    is_active: bool = True

    @property
    def assigned_pattern_ids(self) -> tuple[int, ...]:
        ids = self.individual_pattern_ids or self.department_pattern_ids
        return tuple(ids[:MAX_ASSIGNED_PATTERNS])

    @property
    def display_name(self) -> str:
        return self.full_name.strip() or self.employee_id
