from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import LocalTime, isoformat_or_none
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class TraceEvent:
    """Diagnostic note produced while computing a result (not part of the data contract)."""

    kind: str
    detail: str


@dataclass(frozen=True)
class DailyAttendanceResult:
    """Attendance outcome for one employee on one (working) day."""

    employee_id: str
    date: date
    status: AttendanceStatus
    in_time: Optional[datetime] = None
    out_time: Optional[datetime] = None
    duration_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    shift_name: Optional[str] = None
    shift_start: Optional[LocalTime] = None
    shift_end: Optional[LocalTime] = None
    trace: tuple[TraceEvent, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def empty(cls, employee_id: str, day: date, status: AttendanceStatus) -> "DailyAttendanceResult":
        return cls(employee_id=employee_id, date=day, status=status)

    @property
    def has_shift_metadata(self) -> bool:
        return self.shift_start is not None and self.shift_end is not None

    @property
    def is_stale(self) -> bool:
        """Cached rows for worked shifts must carry the shift they were computed against."""

        return self.status.requires_shift and not self.has_shift_metadata

    def with_trace(self, events: Sequence[TraceEvent]) -> "DailyAttendanceResult":
        if not events:
            return self
        return replace(self, trace=self.trace + tuple(events))

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "in_time": isoformat_or_none(self.in_time),
            "out_time": isoformat_or_none(self.out_time),
            "duration_hours": self.duration_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "shift_name": self.shift_name,
            "shift_start": str(self.shift_start) if self.shift_start else None,
            "shift_end": str(self.shift_end) if self.shift_end else None,
        }


@dataclass(frozen=True)
class CachedRangeReport:
    """Cached rows for a date range plus the dates that have no cached row at all."""

    rows: list[DailyAttendanceResult]
    missing_dates: list[date]


@dataclass(frozen=True)
class BatchOutcome:
    rows: list[DailyAttendanceResult]
    cached: int
    calculated: int
