from datetime import date, datetime, timezone

from src.shift_attendance.shift_attendance.common.datetime_utils import LocalTime
from src.shift_attendance.shift_attendance.common.working_day import WorkingDayPolicy
from src.shift_attendance.shift_attendance.schedules.calendar import ShiftCalendarBuilder
from src.shift_attendance.shift_attendance.schedules.model import EXCEPTION_SOURCE, ScheduleException, WeeklySchedulePattern
from tests.fakes import local, weekday_pattern

MONDAY = date(2025, 1, 6)
SUNDAY = date(2025, 1, 5)


def _build(patterns, exceptions=(), *, start=MONDAY, end=MONDAY, policy=None):
    return ShiftCalendarBuilder(policy or WorkingDayPolicy()).build(patterns, exceptions, start=start, end=end)


def test_builds_windows_from_the_day_before_start():
    windows = _build([weekday_pattern()])

    assert set(windows) == {(SUNDAY, "1"), (MONDAY, "1")}
    assert windows[(SUNDAY, "1")].is_day_off

    monday = windows[(MONDAY, "1")]
    assert not monday.is_day_off
    assert monday.utc_start == datetime(2025, 1, 6, 4, 0, tzinfo=timezone.utc)
    assert monday.utc_end == datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)
    assert monday.scheduled_hours == 8.0
    assert monday.name == "Pattern 1"


def test_overnight_window_ends_on_the_next_day():
    night = WeeklySchedulePattern.from_weekdays(2, "Night", {1: ("21:00", "05:00")})

    window = _build([night])[(MONDAY, "2")]

    assert window.crosses_midnight
    assert window.utc_start == local(2025, 1, 6, 21, 0)
    assert window.utc_end == local(2025, 1, 7, 5, 0)
    assert window.utc_end > window.utc_start
    assert window.grouping_date == MONDAY


def test_each_pattern_contributes_its_own_window():
    windows = _build([weekday_pattern(1), weekday_pattern(2, "13:00", "21:00")])

    assert {(MONDAY, "1"), (MONDAY, "2")} <= set(windows)


def test_day_off_exception_removes_windows():
    exceptions = [ScheduleException(employee_id="E1", date=MONDAY, is_day_off=True)]

    windows = _build([weekday_pattern()], exceptions)

    assert (MONDAY, "1") not in windows
    assert (SUNDAY, "1") in windows


def test_custom_time_exception_replaces_pattern_window():
    exceptions = [
        ScheduleException(employee_id="E1", date=MONDAY, start_time=LocalTime(12, 0), end_time=LocalTime(16, 0))
    ]

    windows = _build([weekday_pattern()], exceptions)

    assert (MONDAY, "1") not in windows
    window = windows[(MONDAY, EXCEPTION_SOURCE)]
    assert window.local_start == LocalTime(12, 0)
    assert window.utc_start == local(2025, 1, 6, 12, 0)
    assert window.scheduled_hours == 4.0


def test_half_day_exception_marks_existing_window():
    exceptions = [ScheduleException(employee_id="E1", date=MONDAY, is_half_day=True)]

    windows = _build([weekday_pattern()], exceptions)

    assert windows[(MONDAY, "1")].is_half_day
    assert not windows[(SUNDAY, "1")].is_half_day


def test_working_day_mode_groups_early_shift_into_previous_working_day():
    policy = WorkingDayPolicy(enabled=True, start=LocalTime(10, 0))
    early = WeeklySchedulePattern.from_weekdays(3, "Early", {1: ("08:00", "16:00")})

    windows = _build([early], policy=policy)

    monday_shift = next(w for w in windows.values() if w.schedule_date == MONDAY)
    assert monday_shift.grouping_date == SUNDAY


def test_half_day_exception_falls_back_to_the_shift_schedule_date():
    early = WeeklySchedulePattern.from_weekdays(3, "Early", {1: ("08:00", "16:00")})
    exceptions = [ScheduleException(employee_id="E1", date=MONDAY, is_half_day=True)]

    windows = _build([early], exceptions, policy=WorkingDayPolicy(enabled=True, start=LocalTime(10, 0)))

    monday_shift = next(w for w in windows.values() if w.schedule_date == MONDAY)
    assert monday_shift.grouping_date == SUNDAY
    assert monday_shift.is_half_day
    assert not any(w.is_half_day for w in windows.values() if w.schedule_date != MONDAY)
