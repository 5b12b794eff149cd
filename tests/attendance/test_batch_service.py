import asyncio
from dataclasses import dataclass, field
from datetime import date

from src.shift_attendance.shift_attendance.attendance.batch import BatchAttendanceService
from src.shift_attendance.shift_attendance.attendance.model import DailyAttendanceResult
from src.shift_attendance.shift_attendance.common.datetime_utils import LocalTime
from src.shift_attendance.shift_attendance.core.enums import AttendanceStatus
from src.shift_attendance.shift_attendance.employees.model import Employee
from tests.fakes import InMemoryCache, InMemoryEmployees

DAY = date(2025, 1, 6)


def _worked(employee_id, *, with_shift=True):
    return DailyAttendanceResult(
        employee_id=employee_id,
        date=DAY,
        status=AttendanceStatus.ON_TIME,
        regular_hours=8.0,
        duration_hours=8.0,
        shift_name="Day" if with_shift else None,
        shift_start=LocalTime(9) if with_shift else None,
        shift_end=LocalTime(17) if with_shift else None,
    )


@dataclass
class StubAttendance:
    """Stands in for AttendanceService.compute_range."""

    statuses: dict[str, AttendanceStatus] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    async def compute_range(self, employee_id, start, end, *, now=None):
        self.calls.append(employee_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if employee_id in self.failing:
                raise RuntimeError("boom")
            status = self.statuses.get(employee_id, AttendanceStatus.ON_TIME)
            if status == AttendanceStatus.ON_TIME:
                return [_worked(employee_id)]
            return [DailyAttendanceResult.empty(employee_id, start, status)]
        finally:
            self.in_flight -= 1


def _roster(*ids):
    return [Employee(employee_id=i, full_name=i) for i in ids]


def test_only_missing_and_stale_rows_are_recomputed():
    cache = InMemoryCache()
    cache.put(_worked("E1"), _worked("E2", with_shift=False))
    stub = StubAttendance()
    service = BatchAttendanceService(stub, cache, InMemoryEmployees())

    outcome = asyncio.run(service.run_batch(DAY, _roster("E1", "E2", "E3")))

    assert sorted(stub.calls) == ["E2", "E3"]
    assert (outcome.cached, outcome.calculated) == (1, 2)
    assert [r.employee_id for r in outcome.rows] == ["E1", "E2", "E3"]
    assert all(r.has_shift_metadata for r in outcome.rows)
    assert sorted(r.employee_id for r in cache.upserts) == ["E2", "E3"]


def test_second_run_is_served_from_cache():
    cache = InMemoryCache()
    stub = StubAttendance()
    service = BatchAttendanceService(stub, cache, InMemoryEmployees())

    asyncio.run(service.run_batch(DAY, _roster("E1", "E2")))
    outcome = asyncio.run(service.run_batch(DAY, _roster("E1", "E2")))

    assert stub.calls == ["E1", "E2"]
    assert (outcome.cached, outcome.calculated) == (2, 0)


def test_terminal_statuses_are_returned_but_not_cached():
    cache = InMemoryCache()
    stub = StubAttendance(statuses={"E9": AttendanceStatus.NO_SCHEDULE_ASSIGNED})
    service = BatchAttendanceService(stub, cache, InMemoryEmployees())

    outcome = asyncio.run(service.run_batch(DAY, _roster("E9")))

    assert outcome.rows[0].status == AttendanceStatus.NO_SCHEDULE_ASSIGNED
    assert cache.upserts == []


def test_failed_employee_falls_back_without_failing_the_batch():
    cache = InMemoryCache()
    stale = _worked("E2", with_shift=False)
    cache.put(stale)
    stub = StubAttendance(failing={"E2", "E3"})
    service = BatchAttendanceService(stub, cache, InMemoryEmployees())

    outcome = asyncio.run(service.run_batch(DAY, _roster("E1", "E2", "E3")))

    by_id = {r.employee_id: r for r in outcome.rows}
    assert by_id["E1"].status == AttendanceStatus.ON_TIME
    assert by_id["E2"] == stale
    assert by_id["E3"].status == AttendanceStatus.ABSENT
    assert outcome.calculated == 1


def test_concurrency_is_bounded():
    stub = StubAttendance()
    service = BatchAttendanceService(stub, InMemoryCache(), InMemoryEmployees(), concurrency=2)

    outcome = asyncio.run(service.run_batch(DAY, _roster(*[f"E{i}" for i in range(7)])))

    assert len(outcome.rows) == 7
    assert stub.max_in_flight <= 2


def test_cache_read_failure_recomputes_everyone():
    cache = InMemoryCache(fail_reads=True)
    stub = StubAttendance()
    service = BatchAttendanceService(stub, cache, InMemoryEmployees())

    outcome = asyncio.run(service.run_batch(DAY, _roster("E1", "E2")))

    assert outcome.calculated == 2
    assert len(outcome.rows) == 2


def test_roster_defaults_to_active_employees():
    employees = InMemoryEmployees.of(
        Employee(employee_id="A"),
        Employee(employee_id="B", is_active=False),
    )
    stub = StubAttendance()
    service = BatchAttendanceService(stub, InMemoryCache(), employees)

    rows = asyncio.run(service.compute_batch_for_date(DAY))

    assert [r.employee_id for r in rows] == ["A"]


def test_cached_range_reports_missing_dates_up_to_today():
    cache = InMemoryCache()
    cache.put(_worked("E1"))
    service = BatchAttendanceService(StubAttendance(), cache, InMemoryEmployees())

    report = asyncio.run(service.read_cached_range(date(2025, 1, 5), date(2025, 1, 10), today=date(2025, 1, 8)))

    assert [r.date for r in report.rows] == [DAY]
    assert report.missing_dates == [date(2025, 1, 5), date(2025, 1, 7), date(2025, 1, 8)]
