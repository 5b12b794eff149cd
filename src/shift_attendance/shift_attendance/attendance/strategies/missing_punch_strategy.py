from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import ShiftContext, StatusDecision, StatusStrategy


class MissingPunchOutStrategy(StatusStrategy):
    """Shift is over but no believable punch-out was recorded."""

    def decide(self, ctx: ShiftContext) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PUNCH_OUT_MISSING)
