from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import hours_between, round_hours
from ..core.constants import (
    BREAK_GRACE_MINUTES,
    MAX_SHIFT_DURATION_HOURS,
    OUT_PUNCH_AFTER_END_MINUTES,
    OVERTIME_BUFFER_MINUTES,
    RECENT_PUNCH_MINUTES,
)
from ..punches.model import PunchEvent
from ..schedules.model import ShiftWindow
from .factory import StatusStrategyFactory
from .model import DailyAttendanceResult, TraceEvent
from .strategies.base import PunchState, ShiftContext


def evaluate_punches(window: ShiftWindow, punches: Sequence[PunchEvent], now: datetime) -> Optional[PunchState]:
    """Derive in/out, still-working and missing punch-out from a shift's punches.

    First punch is the in-punch, last punch the out-punch.
    """

    if not punches:
        return None

    ordered = sorted(punch.timestamp for punch in punches)
    in_time, last = ordered[0], ordered[-1]
    since_last = now - last
    expected_end = window.utc_end

    recent = since_last < timedelta(minutes=BREAK_GRACE_MINUTES)
    if window.is_day_off:
        # A full-day window says nothing about when work should end.
        still_working = recent
    else:
        still_working = now <= expected_end + timedelta(minutes=OVERTIME_BUFFER_MINUTES) or recent

    if len(ordered) == 1:
        return PunchState(
            in_time=in_time,
            last_punch=last,
            punch_count=1,
            still_working=still_working,
            missing_punch_out=not still_working,
            out_time=None,
            duration_hours=0.0,
        )

    if still_working and not window.is_day_off:
        if last > expected_end + timedelta(minutes=OUT_PUNCH_AFTER_END_MINUTES):
            still_working = False
        elif last >= expected_end and since_last > timedelta(minutes=RECENT_PUNCH_MINUTES):
            still_working = False

    if still_working:
        return PunchState(
            in_time=in_time,
            last_punch=last,
            punch_count=len(ordered),
            still_working=True,
            missing_punch_out=False,
            out_time=None,
            duration_hours=0.0,
        )

    raw_hours = hours_between(in_time, last)
    missing = raw_hours > MAX_SHIFT_DURATION_HOURS and last < expected_end
    return PunchState(
        in_time=in_time,
        last_punch=last,
        punch_count=len(ordered),
        still_working=False,
        missing_punch_out=missing,
        out_time=None if missing else last,
        duration_hours=raw_hours,
    )


def split_hours(window: ShiftWindow, worked_hours: float) -> tuple[float, float]:
    """(regular, overtime) against the scheduled length, halved on half days."""

    if window.is_day_off:
        return worked_hours, 0.0
    scheduled = window.scheduled_hours
    if window.is_half_day:
        scheduled /= 2
    if worked_hours <= scheduled:
        return worked_hours, 0.0
    return scheduled, worked_hours - scheduled


class ShiftClassifier:
    def __init__(self, factory: Optional[StatusStrategyFactory] = None):
        self._factory = factory or StatusStrategyFactory()

    def classify(
        self,
        window: ShiftWindow,
        punches: Sequence[PunchEvent],
        *,
        employee_id: str,
        grace_minutes: int,
        now: datetime,
        on_leave: bool = False,
    ) -> DailyAttendanceResult:
        state = evaluate_punches(window, punches, now)
        ctx = ShiftContext(window=window, punches=state, grace_minutes=grace_minutes, on_leave=on_leave)
        decision = self._factory.for_shift(ctx).decide(ctx)

        regular = overtime = duration = 0.0
        if state is not None:
            duration = state.duration_hours
            # Hours count only when the out-punch is trusted.
            if state.out_time is not None:
                regular, overtime = split_hours(window, duration)

        trace = [
            TraceEvent(
                "classified",
                f"shift {window.source} {window.local_start}-{window.local_end} -> {decision.status.value}",
            )
        ]
        if decision.note:
            trace.append(TraceEvent("note", decision.note))

        return DailyAttendanceResult(
            employee_id=employee_id,
            date=window.grouping_date,
            status=decision.status,
            in_time=state.in_time if state else None,
            out_time=state.out_time if state else None,
            duration_hours=round_hours(duration),
            regular_hours=round_hours(regular),
            overtime_hours=round_hours(overtime),
            shift_name=window.name or None,
            shift_start=window.local_start,
            shift_end=window.local_end,
            trace=tuple(trace),
        )
