from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import ONE_DAY, iter_dates
from ..common.working_day import WorkingDayPolicy
from .model import EXCEPTION_SOURCE, FULL_DAY, DaySegment, ScheduleException, ShiftWindow, WeeklySchedulePattern

logger = logging.getLogger(__name__)

WindowKey = tuple[date, str]


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


class ShiftCalendarBuilder:
    """Expands weekly patterns and per-date exceptions into concrete shift windows.

    Local schedule times are converted to UTC here and nowhere else. The range
    starts one day before ``start`` so overnight shifts that began the previous
    evening are available to the matcher.
    """

    def __init__(self, policy: WorkingDayPolicy):
        self._policy = policy

    def build(
        self,
        patterns: Sequence[WeeklySchedulePattern],
        exceptions: Iterable[ScheduleException],
        *,
        start: date,
        end: date,
    ) -> dict[WindowKey, ShiftWindow]:
        windows: dict[WindowKey, ShiftWindow] = {}

        for day in iter_dates(start - ONE_DAY, end):
            weekday = sunday_based_weekday(day)
            for pattern in patterns:
                segment = pattern.segment_for(weekday)
                window = self._window(
                    day,
                    segment or FULL_DAY,
                    source=str(pattern.pattern_id),
                    name=pattern.name,
                    is_day_off=segment is None,
                )
                # First window per (grouping date, pattern) wins.
                if window.key not in windows:
                    windows[window.key] = window
                    logger.debug(
                        "window %s pattern=%s local=%s-%s utc=%s..%s day_off=%s",
                        window.grouping_date,
                        window.source,
                        window.local_start,
                        window.local_end,
                        window.utc_start.isoformat(),
                        window.utc_end.isoformat(),
                        window.is_day_off,
                    )

        for exception in sorted(exceptions, key=lambda ex: ex.date):
            self._apply_exception(windows, exception)

        return windows

    def _window(
        self,
        day: date,
        segment: DaySegment,
        *,
        source: str,
        name: str,
        is_day_off: bool = False,
        is_half_day: bool = False,
        grouping_date: Optional[date] = None,
    ) -> ShiftWindow:
        tz = self._policy.tz
        crosses = segment.crosses_midnight
        utc_start = tz.to_utc(day, segment.start)
        utc_end = tz.to_utc(day + ONE_DAY if crosses else day, segment.end)

        if grouping_date is None:
            grouping_date = self._policy.day_for(utc_start) if self._policy.enabled else day

        return ShiftWindow(
            local_start=segment.start,
            local_end=segment.end,
            crosses_midnight=crosses,
            utc_start=utc_start,
            utc_end=utc_end,
            is_day_off=is_day_off,
            is_half_day=is_half_day,
            grouping_date=grouping_date,
            schedule_date=day,
            source=source,
            name=name,
        )

    def _apply_exception(self, windows: dict[WindowKey, ShiftWindow], exception: ScheduleException) -> None:
        matching = [key for key, window in windows.items() if window.grouping_date == exception.date]

        if exception.is_day_off:
            for key in matching:
                del windows[key]
            logger.debug("exception %s: day off (%d windows removed)", exception.date, len(matching))
            return

        if exception.has_custom_time:
            for key in matching:
                del windows[key]
            window = self._window(
                exception.date,
                DaySegment(exception.start_time, exception.end_time),
                source=EXCEPTION_SOURCE,
                name="Exception",
                is_half_day=exception.is_half_day,
                grouping_date=exception.date,
            )
            windows[window.key] = window
            logger.debug(
                "exception %s: custom shift %s-%s half_day=%s",
                exception.date,
                exception.start_time,
                exception.end_time,
                exception.is_half_day,
            )
            return

        if not exception.is_half_day:
            return

        if matching:
            for key in matching:
                windows[key] = replace(windows[key], is_half_day=True)
            return

        # Grouping can differ from the schedule's own local date in working-day mode.
        for key, window in windows.items():
            if window.schedule_date == exception.date:
                windows[key] = replace(window, is_half_day=True)
                return

        logger.warning("Half day exception for %s matches no shift", exception.date)
