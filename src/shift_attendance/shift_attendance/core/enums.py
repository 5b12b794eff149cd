from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance classification reported for one employee and date."""

    ON_TIME = "On-Time"
    LATE_IN = "Late-In"
    PRESENT = "Present"
    HALF_DAY = "Half Day"
    DAY_OFF = "Day Off"
    ON_LEAVE = "On Leave"
    OUT_OF_SCHEDULE = "Out of Schedule"
    PUNCH_OUT_MISSING = "Punch Out Missing"
    WORKED_ON_DAY_OFF = "Worked on Day Off"
    ABSENT = "Absent"
    EMPLOYEE_NOT_FOUND = "Employee Not Found"
    NO_SCHEDULE_ASSIGNED = "No Schedule Assigned"

    @property
    def is_terminal(self) -> bool:
        """Lookup outcomes that no recomputation can change."""

        return self in (AttendanceStatus.EMPLOYEE_NOT_FOUND, AttendanceStatus.NO_SCHEDULE_ASSIGNED)

    @property
    def requires_shift(self) -> bool:
        """Statuses only produced from a matched shift window."""

        return self in _SHIFT_STATUSES


_SHIFT_STATUSES = frozenset(
    {
        AttendanceStatus.ON_TIME,
        AttendanceStatus.LATE_IN,
        AttendanceStatus.HALF_DAY,
        AttendanceStatus.OUT_OF_SCHEDULE,
        AttendanceStatus.PUNCH_OUT_MISSING,
        AttendanceStatus.WORKED_ON_DAY_OFF,
    }
)


class LeaveStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
