from __future__ import annotations

from dataclasses import dataclass

from .strategies.absence_strategy import AbsenceStrategy
from .strategies.arrival_strategy import ArrivalStrategy
from .strategies.base import ShiftContext, StatusStrategy
from .strategies.day_off_strategy import DayOffWorkedStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.missing_punch_strategy import MissingPunchOutStrategy
from .strategies.scheduled_strategy import ScheduledStrategy


@dataclass
class StatusStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    A missing punch-out outranks working on a day off, which outranks the
    in-progress, half-day and on-schedule checks.
    """

    def for_shift(self, ctx: ShiftContext) -> StatusStrategy:
        state = ctx.punches
        if state is None:
            return AbsenceStrategy()
        if state.missing_punch_out:
            return MissingPunchOutStrategy()
        if ctx.window.is_day_off:
            return DayOffWorkedStrategy()
        if state.still_working:
            return ArrivalStrategy()
        if ctx.window.is_half_day:
            return HalfDayStrategy()
        return ScheduledStrategy()
