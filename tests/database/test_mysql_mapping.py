import asyncio
from datetime import date, datetime, time, timedelta, timezone

import mysql.connector
import pytest

from src.shift_attendance.shift_attendance.attendance.model import DailyAttendanceResult
from src.shift_attendance.shift_attendance.attendance.mysql_attendance_repository import (
    result_to_params,
    row_to_result,
)
from src.shift_attendance.shift_attendance.common.datetime_utils import LocalTime
from src.shift_attendance.shift_attendance.core.enums import AttendanceStatus
from src.shift_attendance.shift_attendance.core.exceptions import DataSourceError
from src.shift_attendance.shift_attendance.database.bootstrap import iter_sql_statements
from src.shift_attendance.shift_attendance.database.mysql_base import normalize_mysql_time, run_blocking
from src.shift_attendance.shift_attendance.employees.mysql_employee_repository import row_to_employee
from src.shift_attendance.shift_attendance.schedules.mysql_schedule_repository import (
    MySQLScheduleRepository,
    row_to_exception,
    row_to_pattern,
)
from src.shift_attendance.shift_attendance.settings.mysql_settings_repository import settings_from_rows

OFF = "00002359"
OFFICE = OFF + "09001700" * 5 + OFF


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows):
        self.cursor = FakeCursor(rows)

    def connect(self):
        return FakeConnection(self.cursor)


def test_cache_row_round_trip_keeps_shift_metadata():
    result = DailyAttendanceResult(
        employee_id="E1",
        date=date(2025, 1, 6),
        status=AttendanceStatus.LATE_IN,
        in_time=datetime(2025, 1, 6, 16, 10, tzinfo=timezone.utc),
        out_time=datetime(2025, 1, 7, 0, 0, tzinfo=timezone.utc),
        duration_hours=7.83,
        regular_hours=7.83,
        shift_name="Night",
        shift_start=LocalTime(21, 0),
        shift_end=LocalTime(5, 0),
    )
    params = result_to_params(result)
    columns = [
        "employee_id", "date", "status", "in_time", "out_time", "duration_hours", "regular_hours",
        "overtime_hours", "shift_name", "shift_start_time", "shift_end_time",
    ]
    row = dict(zip(columns, params))

    assert row["in_time"].tzinfo is None
    assert row["status"] == "Late-In"
    assert row_to_result(row) == result


def test_cached_time_columns_may_arrive_as_timedelta():
    row = row_to_result(
        {
            "employee_id": "E1",
            "date": date(2025, 1, 6),
            "status": "On-Time",
            "shift_start_time": timedelta(hours=9),
            "shift_end_time": "17:00:00",
            "duration_hours": None,
        }
    )

    assert row.shift_start == LocalTime(9, 0)
    assert row.shift_end == LocalTime(17, 0)
    assert row.duration_hours == 0.0
    assert not row.is_stale


def test_employee_row_prefers_individual_patterns():
    employee = row_to_employee(
        {
            "id": "E7",
            "full_name": "Hina",
            "department_id": 2,
            "is_active": 1,
            "individual_tz_1": None,
            "individual_tz_2": 11,
            "individual_tz_3": None,
            "tz_id_1": 1,
            "tz_id_2": 2,
            "tz_id_3": None,
        }
    )

    assert employee.individual_pattern_ids == (11,)
    assert employee.department_pattern_ids == (1, 2)
    assert employee.assigned_pattern_ids == (11,)


def test_malformed_tz_string_is_skipped():
    assert row_to_pattern({"id": 3, "name": "Bad", "tz_string": "0900"}) is None

    pattern = row_to_pattern({"id": 4, "name": "Office", "tz_string": OFFICE, "buffer_time_minutes": 15})
    assert pattern.grace_minutes == 15


def test_exception_row_times():
    ex = row_to_exception(
        "E1",
        {"date": date(2025, 1, 6), "start_time": timedelta(hours=12), "end_time": None, "is_day_off": 0, "is_half_day": 1},
    )

    assert ex.is_half_day
    assert ex.start_time == LocalTime(12, 0)
    assert not ex.has_custom_time


def test_settings_rows_parse_strings_and_ignore_bad_values():
    settings = settings_from_rows(
        {"buffer_time_minutes": "15", "working_day_enabled": "true", "working_day_start_time": "nope"}
    )

    assert settings.default_grace_minutes == 15
    assert settings.working_day_enabled is True
    assert settings.working_day_start is None


def test_schedule_repository_keeps_requested_order():
    factory = FakeConnFactory(
        [
            {"id": 2, "name": "Late", "tz_string": OFF + "13002100" * 5 + OFF, "buffer_time_minutes": None},
            {"id": 1, "name": "Office", "tz_string": OFFICE, "buffer_time_minutes": None},
        ]
    )
    repo = MySQLScheduleRepository(factory)

    patterns = asyncio.run(repo.get_patterns([1, 2, 5]))

    assert [p.pattern_id for p in patterns] == [1, 2]
    assert factory.cursor.executed[0][1] == (1, 2, 5)


def test_driver_errors_become_data_source_errors():
    def broken():
        raise mysql.connector.Error("connection refused")

    with pytest.raises(DataSourceError):
        asyncio.run(run_blocking(broken))


def test_normalize_mysql_time_variants():
    assert normalize_mysql_time(timedelta(hours=21, minutes=30)) == time(21, 30)
    assert normalize_mysql_time("08:15") == time(8, 15)
    assert normalize_mysql_time(None) is None


def test_sql_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = "-- header; comment\nCREATE TABLE a (x VARCHAR(3) DEFAULT ';');\nCREATE TABLE b (y INT);"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x VARCHAR(3) DEFAULT ';')",
        "CREATE TABLE b (y INT)",
    ]
