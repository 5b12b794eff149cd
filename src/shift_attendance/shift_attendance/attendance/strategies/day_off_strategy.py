from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import ShiftContext, StatusDecision, StatusStrategy


class DayOffWorkedStrategy(StatusStrategy):
    def decide(self, ctx: ShiftContext) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.WORKED_ON_DAY_OFF)
