from __future__ import annotations

from datetime import timedelta

from ...core.constants import SCHEDULE_TOLERANCE_MINUTES
from ...core.enums import AttendanceStatus
from .base import ShiftContext, StatusDecision, StatusStrategy, arrival_status


class ScheduledStrategy(StatusStrategy):
    """Completed shift: the in-punch must fall near the real shift window.

    The tolerance here is independent of the matching buffer, which only decides
    which shift a punch belongs to.
    """

    def decide(self, ctx: ShiftContext) -> StatusDecision:
        tolerance = timedelta(minutes=SCHEDULE_TOLERANCE_MINUTES)
        in_time = ctx.punches.in_time
        if not (ctx.window.utc_start - tolerance <= in_time <= ctx.window.utc_end + tolerance):
            return StatusDecision(status=AttendanceStatus.OUT_OF_SCHEDULE)
        return StatusDecision(status=arrival_status(in_time, ctx.window.utc_start, ctx.grace_minutes))
