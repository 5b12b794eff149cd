from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import ShiftContext, StatusDecision, StatusStrategy


class HalfDayStrategy(StatusStrategy):
    def decide(self, ctx: ShiftContext) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)
