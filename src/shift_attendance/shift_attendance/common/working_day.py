"""Working-day boundaries.

A working day spans from a configurable local start time (e.g. 10:00) to one
minute before that time on the next calendar day. Overnight shifts and their
punches are attributed to the working day in which the shift started.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from ..core.constants import DEFAULT_WORKING_DAY_START
from .datetime_utils import ONE_DAY, LocalTime, OrgTimezone, ensure_utc


@dataclass(frozen=True)
class WorkingDayPolicy:
    enabled: bool = False
    start: LocalTime = field(default_factory=lambda: LocalTime.parse(DEFAULT_WORKING_DAY_START))
    tz: OrgTimezone = field(default_factory=OrgTimezone)

    def day_for(self, instant: datetime) -> date:
        """Label of the working day containing ``instant``."""

        local_day = self.tz.local_date(instant)
        if ensure_utc(instant) < self.start_of(local_day):
            return local_day - ONE_DAY
        return local_day

    def start_of(self, day: date) -> datetime:
        return self.tz.to_utc(day, self.start)

    def end_of(self, day: date) -> datetime:
        return self.start_of(day + ONE_DAY) - timedelta(minutes=1)

    def contains(self, instant: datetime, day: date) -> bool:
        instant = ensure_utc(instant)
        return self.start_of(day) <= instant < self.start_of(day + ONE_DAY)

    def grouping_date(self, instant: datetime) -> date:
        """Working day when enabled, otherwise the local calendar date."""

        if self.enabled:
            return self.day_for(instant)
        return self.tz.local_date(instant)
