from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.batch import BatchAttendanceService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceCacheRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .payroll.service import PayrollSummaryService
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .settings.model import EngineSettings
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository


@dataclass(frozen=True)
class Container:
    engine_settings: EngineSettings

    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    leave_repo: LeaveRepository
    punches_repo: PunchRepository
    settings_repo: SettingsRepository
    cache_repo: AttendanceCacheRepository

    attendance_service: AttendanceService
    batch_service: BatchAttendanceService
    payroll_service: PayrollSummaryService

    conn: Optional[DatabaseConnection] = None


def wire_services(
    *,
    engine_settings: EngineSettings,
    employees_repo: EmployeeRepository,
    schedules_repo: ScheduleRepository,
    leave_repo: LeaveRepository,
    punches_repo: PunchRepository,
    settings_repo: SettingsRepository,
    cache_repo: AttendanceCacheRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    attendance_service = AttendanceService(
        employees_repo,
        schedules_repo,
        leave_repo,
        punches_repo,
        settings_repo,
        engine_settings=engine_settings,
    )
    batch_service = BatchAttendanceService(
        attendance_service,
        cache_repo,
        employees_repo,
        concurrency=engine_settings.batch_concurrency,
    )
    payroll_service = PayrollSummaryService(attendance_service, employees_repo)

    return Container(
        engine_settings=engine_settings,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        leave_repo=leave_repo,
        punches_repo=punches_repo,
        settings_repo=settings_repo,
        cache_repo=cache_repo,
        attendance_service=attendance_service,
        batch_service=batch_service,
        payroll_service=payroll_service,
        conn=conn,
    )


def build_container(*, db_config: dict, engine_settings: EngineSettings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_services(
        engine_settings=engine_settings,
        employees_repo=MySQLEmployeeRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        punches_repo=MySQLPunchRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        cache_repo=MySQLAttendanceRepository(conn),
        conn=conn,
    )
