from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import LocalTime
from ..core.exceptions import ValidationError

TZ_STRING_LENGTH = 56
EXCEPTION_SOURCE = "exception"


@dataclass(frozen=True)
class DaySegment:
    """Expected local working hours for one weekday."""

    start: LocalTime
    end: LocalTime

    @property
    def is_day_off(self) -> bool:
        # Devices encode a non-working day as 0000-2359.
        return self.start == LocalTime(0, 0) and self.end == LocalTime(23, 59)

    @property
    def crosses_midnight(self) -> bool:
        return not self.is_day_off and self.end <= self.start

    @classmethod
    def parse(cls, segment: str) -> "DaySegment":
        if len(segment) != 8:
            raise ValidationError(f"Invalid schedule segment: {segment!r}")
        return cls(LocalTime.parse(segment[:4]), LocalTime.parse(segment[4:]))


FULL_DAY = DaySegment(LocalTime(0, 0), LocalTime(23, 59))


@dataclass(frozen=True)
class WeeklySchedulePattern:
    """Recurring weekly schedule, one entry per weekday starting on Sunday.

    ``None`` marks a day off. ``grace_minutes`` overrides the organisation
    default late-in allowance when set.
    """

    pattern_id: int
    name: str
    days: tuple[Optional[DaySegment], ...]
    grace_minutes: Optional[int] = None

    def __post_init__(self) -> None:
        if len(self.days) != 7:
            raise ValidationError("A weekly schedule needs exactly 7 days")

    def segment_for(self, weekday: int) -> Optional[DaySegment]:
        """Segment for ``weekday`` (0 = Sunday); ``None`` on days off."""

        segment = self.days[weekday]
        if segment is None or segment.is_day_off:
            return None
        return segment

    @classmethod
    def from_tz_string(
        cls,
        pattern_id: int,
        name: str,
        tz_string: str,
        *,
        grace_minutes: Optional[int] = None,
    ) -> "WeeklySchedulePattern":
        """Decode the device schedule format: 7 x ``HHMMHHMM``, Sunday first."""

        if not tz_string or len(tz_string) < TZ_STRING_LENGTH:
            raise ValidationError(f"Schedule string for pattern {pattern_id} is too short")
        days = []
        for weekday in range(7):
            segment = DaySegment.parse(tz_string[weekday * 8 : weekday * 8 + 8])
            days.append(None if segment.is_day_off else segment)
        return cls(pattern_id=pattern_id, name=name, days=tuple(days), grace_minutes=grace_minutes)

    @classmethod
    def from_weekdays(
        cls,
        pattern_id: int,
        name: str,
        segments: dict[int, tuple[str, str]],
        *,
        grace_minutes: Optional[int] = None,
    ) -> "WeeklySchedulePattern":
        """Build from ``{weekday: (start, end)}``; missing weekdays are days off."""

        days = tuple(
            DaySegment(LocalTime.parse(segments[d][0]), LocalTime.parse(segments[d][1])) if d in segments else None
            for d in range(7)
        )
        return cls(pattern_id=pattern_id, name=name, days=days, grace_minutes=grace_minutes)


@dataclass(frozen=True)
class ScheduleException:
    """Per-date override of the weekly schedule for one employee."""

    employee_id: str
    date: date
    is_day_off: bool = False
    is_half_day: bool = False
    start_time: Optional[LocalTime] = None
    end_time: Optional[LocalTime] = None

    @property
    def has_custom_time(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass(frozen=True)
class ShiftWindow:
    """One expected work period resolved to absolute UTC instants."""

    local_start: LocalTime
    local_end: LocalTime
    crosses_midnight: bool
    utc_start: datetime
    utc_end: datetime
    is_day_off: bool
    is_half_day: bool
    grouping_date: date
    schedule_date: date
    source: str
    name: str = ""

    @property
    def key(self) -> tuple[date, str]:
        return (self.grouping_date, self.source)

    @property
    def scheduled_hours(self) -> float:
        return (self.utc_end - self.utc_start).total_seconds() / 3600


def first_grace_override(patterns: Sequence[WeeklySchedulePattern]) -> Optional[int]:
    for pattern in patterns:
        if pattern.grace_minutes is not None:
            return int(pattern.grace_minutes)
    return None
