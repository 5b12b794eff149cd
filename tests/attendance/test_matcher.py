from datetime import date

from src.shift_attendance.shift_attendance.attendance.matcher import (
    AFTER_MIDNIGHT_SCORE,
    DAY_OFF_SCORE,
    INSIDE_WINDOW_SCORE,
    PunchMatcher,
)
from src.shift_attendance.shift_attendance.common.datetime_utils import LocalTime
from src.shift_attendance.shift_attendance.common.working_day import WorkingDayPolicy
from src.shift_attendance.shift_attendance.punches.model import PunchEvent
from src.shift_attendance.shift_attendance.schedules.calendar import ShiftCalendarBuilder
from src.shift_attendance.shift_attendance.schedules.model import WeeklySchedulePattern
from tests.fakes import local, weekday_pattern

MONDAY = date(2025, 1, 6)
TUESDAY = date(2025, 1, 7)
FRIDAY = date(2025, 1, 10)
SATURDAY = date(2025, 1, 11)

NIGHT = WeeklySchedulePattern.from_weekdays(2, "Night", {d: ("21:00", "05:00") for d in range(1, 6)})


def _windows(pattern, *, start=MONDAY, end=TUESDAY, policy=None):
    return ShiftCalendarBuilder(policy or WorkingDayPolicy()).build([pattern], [], start=start, end=end)


def test_punch_after_midnight_goes_to_the_overnight_shift_that_started_the_day_before():
    windows = _windows(NIGHT)
    punch = PunchEvent(local(2025, 1, 7, 2, 0))

    result = PunchMatcher(WorkingDayPolicy()).match([punch], windows)

    assert result.assigned == {MONDAY: [punch]}
    assert result.decisions[0].score == AFTER_MIDNIGHT_SCORE


def test_scores_inside_and_in_buffer():
    matcher = PunchMatcher(WorkingDayPolicy())
    monday = _windows(weekday_pattern())[(MONDAY, "1")]

    assert matcher.score(local(2025, 1, 6, 12, 0), monday) == INSIDE_WINDOW_SCORE
    assert matcher.score(local(2025, 1, 6, 8, 0), monday) == 99.0
    assert matcher.score(local(2025, 1, 6, 6, 59), monday) is None
    assert matcher.score(local(2025, 1, 7, 3, 1), monday) is None


def test_punch_outside_every_buffer_is_unmatched():
    windows = _windows(weekday_pattern(), start=MONDAY, end=MONDAY)
    stray = PunchEvent(local(2025, 1, 7, 4, 0))

    result = PunchMatcher(WorkingDayPolicy()).match([stray], windows)

    assert result.assigned == {}
    assert result.unmatched == [stray]


def test_day_shift_punches_land_on_their_own_date():
    windows = _windows(weekday_pattern())
    punches = [PunchEvent(local(2025, 1, 6, 9, 5)), PunchEvent(local(2025, 1, 6, 17, 0)), PunchEvent(local(2025, 1, 7, 9, 0))]

    result = PunchMatcher(WorkingDayPolicy()).match(punches, windows)

    assert result.assigned[MONDAY] == punches[:2]
    assert result.assigned[TUESDAY] == punches[2:]
    assert result.wins_by_window() == {(MONDAY, "1"): 2, (TUESDAY, "1"): 1}


def test_working_day_mode_extends_buffer_to_next_working_day_start():
    policy = WorkingDayPolicy(enabled=True, start=LocalTime(6, 0))
    windows = _windows(weekday_pattern(), policy=policy)
    matcher = PunchMatcher(policy)
    monday = windows[(MONDAY, "1")]

    assert matcher.buffer_end(monday) == local(2025, 1, 7, 6, 0)
    # Past the normal 10h buffer but still inside Monday's working day.
    assert matcher.score(local(2025, 1, 7, 5, 30), monday) is not None


def test_overnight_punch_out_beats_the_next_days_day_off_window():
    windows = _windows(NIGHT, start=FRIDAY, end=SATURDAY)
    saturday = windows[(SATURDAY, "2")]
    punch_out = PunchEvent(local(2025, 1, 11, 5, 5))
    matcher = PunchMatcher(WorkingDayPolicy())

    result = matcher.match([punch_out], windows)

    assert saturday.is_day_off
    assert matcher.score(punch_out.timestamp, saturday) == DAY_OFF_SCORE
    assert result.assigned == {FRIDAY: [punch_out]}
    assert result.decisions[0].window_key == (FRIDAY, "2")
    assert result.decisions[0].score > DAY_OFF_SCORE


def test_day_off_window_still_wins_over_a_plain_buffer():
    windows = _windows(weekday_pattern(), start=FRIDAY, end=SATURDAY)
    weekend_punch = PunchEvent(local(2025, 1, 11, 1, 0))

    result = PunchMatcher(WorkingDayPolicy()).match([weekend_punch], windows)

    assert result.assigned == {SATURDAY: [weekend_punch]}
    assert result.decisions[0].score == DAY_OFF_SCORE
