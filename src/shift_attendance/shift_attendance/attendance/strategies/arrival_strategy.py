from __future__ import annotations

from .base import ShiftContext, StatusDecision, StatusStrategy, arrival_status


class ArrivalStrategy(StatusStrategy):
    """Shift still in progress: only the in-punch can be judged."""

    def decide(self, ctx: ShiftContext) -> StatusDecision:
        status = arrival_status(ctx.punches.in_time, ctx.window.utc_start, ctx.grace_minutes)
        return StatusDecision(status=status, note="still working")
