from datetime import date, datetime, timezone

import pytest

from src.shift_attendance.shift_attendance.common.datetime_utils import LocalTime, OrgTimezone, round_hours
from src.shift_attendance.shift_attendance.common.working_day import WorkingDayPolicy
from src.shift_attendance.shift_attendance.core.exceptions import ValidationError
from tests.fakes import local


def test_org_timezone_converts_local_schedule_time_to_utc():
    tz = OrgTimezone.from_minutes(300)

    assert tz.to_utc(date(2025, 1, 6), LocalTime(9, 0)) == datetime(2025, 1, 6, 4, 0, tzinfo=timezone.utc)
    assert tz.local_date(datetime(2025, 1, 6, 20, 0, tzinfo=timezone.utc)) == date(2025, 1, 7)


def test_instant_before_start_time_belongs_to_previous_working_day():
    policy = WorkingDayPolicy(enabled=True, start=LocalTime(10, 0))

    assert policy.day_for(local(2025, 1, 7, 3, 0)) == date(2025, 1, 6)
    assert policy.day_for(local(2025, 1, 7, 9, 59)) == date(2025, 1, 6)
    assert policy.day_for(local(2025, 1, 7, 10, 0)) == date(2025, 1, 7)


def test_working_day_ends_one_minute_before_next_start():
    policy = WorkingDayPolicy(enabled=True, start=LocalTime(10, 0))

    assert policy.start_of(date(2025, 1, 6)) == local(2025, 1, 6, 10, 0)
    assert policy.end_of(date(2025, 1, 6)) == local(2025, 1, 7, 9, 59)
    assert policy.contains(local(2025, 1, 7, 9, 59), date(2025, 1, 6))
    assert not policy.contains(local(2025, 1, 7, 10, 0), date(2025, 1, 6))


def test_grouping_date_is_local_date_when_disabled():
    policy = WorkingDayPolicy(enabled=False)

    assert policy.grouping_date(local(2025, 1, 7, 3, 0)) == date(2025, 1, 7)


def test_local_time_parsing():
    assert LocalTime.parse("0930") == LocalTime(9, 30)
    assert LocalTime.parse("21:05:00") == LocalTime(21, 5)
    assert str(LocalTime(7, 5)) == "07:05"

    with pytest.raises(ValidationError):
        LocalTime.parse("25:00")
    with pytest.raises(ValidationError):
        LocalTime.parse("abc")


def test_round_hours_half_up_and_never_negative():
    assert round_hours(7.915) == 7.92
    assert round_hours(23 / 3) == 7.67
    assert round_hours(-0.5) == 0.0
