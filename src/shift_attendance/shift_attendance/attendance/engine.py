from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import hours_between, iter_dates, round_hours
from ..common.working_day import WorkingDayPolicy
from ..core.enums import AttendanceStatus
from ..leave.model import LeaveRecord, approved_leave_dates
from ..punches.model import PunchEvent
from ..schedules.calendar import ShiftCalendarBuilder, WindowKey
from ..schedules.model import ScheduleException, ShiftWindow, WeeklySchedulePattern
from .classifier import ShiftClassifier
from .matcher import MatchResult, PunchMatcher
from .model import DailyAttendanceResult, TraceEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputationInput:
    """Everything one employee's computation needs; fetched by the caller."""

    employee_id: str
    start: date
    end: date
    patterns: Sequence[WeeklySchedulePattern]
    exceptions: Sequence[ScheduleException]
    leave: Sequence[LeaveRecord]
    punches: Sequence[PunchEvent]
    grace_minutes: int
    now: datetime


class AttendanceEngine:
    """Calendar builder -> punch matcher -> shift classifier for one employee.

    Pure: the same input always yields the same results.
    """

    def __init__(
        self,
        policy: WorkingDayPolicy,
        *,
        classifier: Optional[ShiftClassifier] = None,
    ):
        self._policy = policy
        self._builder = ShiftCalendarBuilder(policy)
        self._matcher = PunchMatcher(policy)
        self._classifier = classifier or ShiftClassifier()

    def compute(self, data: ComputationInput) -> list[DailyAttendanceResult]:
        windows = self._builder.build(data.patterns, data.exceptions, start=data.start, end=data.end)
        leave_dates = approved_leave_dates(data.leave)

        results: dict[date, DailyAttendanceResult] = {}
        if windows:
            match = self._matcher.match(data.punches, windows)
            results.update(self._classify_windows(data, windows, match, leave_dates))
            unmatched = match.unmatched
        else:
            logger.debug("employee %s: no shift windows between %s and %s", data.employee_id, data.start, data.end)
            unmatched = list(data.punches)

        for day, punches in self._group_unmatched(unmatched).items():
            # Shift results always win over stray punches for the same date.
            if day not in results:
                results[day] = self._present(data.employee_id, day, punches)

        day_off_dates = {ex.date for ex in data.exceptions if ex.is_day_off}
        rows = []
        for day in iter_dates(data.start, data.end):
            row = results.get(day)
            if row is None:
                row = DailyAttendanceResult.empty(data.employee_id, day, self._gap_status(day, leave_dates, day_off_dates))
            rows.append(row)
        return rows

    def _classify_windows(
        self,
        data: ComputationInput,
        windows: dict[WindowKey, ShiftWindow],
        match: MatchResult,
        leave_dates: frozenset[date],
    ) -> dict[date, DailyAttendanceResult]:
        by_date: dict[date, list[ShiftWindow]] = {}
        for window in windows.values():
            by_date.setdefault(window.grouping_date, []).append(window)

        wins = match.wins_by_window()
        results: dict[date, DailyAttendanceResult] = {}
        for day, candidates in by_date.items():
            if not data.start <= day <= data.end:
                continue
            punches = match.assigned.get(day, [])
            window = max(candidates, key=lambda w: wins.get(w.key, 0)) if punches else candidates[0]
            result = self._classifier.classify(
                window,
                punches,
                employee_id=data.employee_id,
                grace_minutes=data.grace_minutes,
                now=data.now,
                on_leave=day in leave_dates,
            )
            trace = tuple(
                TraceEvent("matched", f"punch {d.punch.timestamp.isoformat()} -> {d.window_key[1]} score={d.score:.2f}")
                for d in match.decisions
                if d.window_key[0] == day
            )
            results[day] = result.with_trace(trace)
        return results

    def _group_unmatched(self, punches: Sequence[PunchEvent]) -> dict[date, list[PunchEvent]]:
        grouped: dict[date, list[PunchEvent]] = {}
        for punch in punches:
            grouped.setdefault(self._policy.grouping_date(punch.timestamp), []).append(punch)
        return grouped

    def _present(self, employee_id: str, day: date, punches: Sequence[PunchEvent]) -> DailyAttendanceResult:
        ordered = sorted(p.timestamp for p in punches)
        in_time, out_time = ordered[0], ordered[-1]
        hours = round_hours(hours_between(in_time, out_time))
        return DailyAttendanceResult(
            employee_id=employee_id,
            date=day,
            status=AttendanceStatus.PRESENT,
            in_time=in_time,
            out_time=out_time if len(ordered) > 1 else None,
            duration_hours=hours,
            regular_hours=hours,
            overtime_hours=0.0,
            trace=(TraceEvent("unmatched", f"{len(ordered)} punches outside every shift"),),
        )

    @staticmethod
    def _gap_status(day: date, leave_dates: frozenset[date], day_off_dates: set[date]) -> AttendanceStatus:
        if day in leave_dates:
            return AttendanceStatus.ON_LEAVE
        if day in day_off_dates:
            return AttendanceStatus.DAY_OFF
        return AttendanceStatus.ABSENT

