from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import ShiftWindow


@dataclass(frozen=True)
class PunchState:
    """What the punches of one shift say about the employee's day."""

    in_time: datetime
    last_punch: datetime
    punch_count: int
    still_working: bool
    missing_punch_out: bool
    out_time: Optional[datetime]
    duration_hours: float


@dataclass(frozen=True)
class ShiftContext:
    window: ShiftWindow
    punches: Optional[PunchState]
    grace_minutes: int
    on_leave: bool = False


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class StatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide(self, ctx: ShiftContext) -> StatusDecision:
        raise NotImplementedError


def arrival_status(in_time: datetime, expected_start: datetime, grace_minutes: int) -> AttendanceStatus:
    if in_time <= expected_start + timedelta(minutes=grace_minutes):
        return AttendanceStatus.ON_TIME
    return AttendanceStatus.LATE_IN
