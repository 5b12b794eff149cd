from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import ShiftContext, StatusDecision, StatusStrategy


class AbsenceStrategy(StatusStrategy):
    """No punches: leave beats day off, day off beats half day, otherwise absent."""

    def decide(self, ctx: ShiftContext) -> StatusDecision:
        if ctx.on_leave:
            return StatusDecision(status=AttendanceStatus.ON_LEAVE)
        if ctx.window.is_day_off:
            return StatusDecision(status=AttendanceStatus.DAY_OFF)
        if ctx.window.is_half_day:
            return StatusDecision(status=AttendanceStatus.HALF_DAY)
        return StatusDecision(status=AttendanceStatus.ABSENT)
