from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import CalendarClock
from .core.constants import DEFAULT_UTC_OFFSET_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeDirectory
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .roster.service import RosterService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: CalendarClock

    employees_repo: EmployeeRepository
    holidays_repo: HolidayRepository
    attendance_repo: AttendanceRepository

    directory: EmployeeDirectory
    holiday_service: HolidayService
    attendance_service: AttendanceService
    roster_service: RosterService


def wire(
    *,
    employees_repo: EmployeeRepository,
    holidays_repo: HolidayRepository,
    attendance_repo: AttendanceRepository,
    clock: CalendarClock,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the service graph over any set of repositories."""

    directory = EmployeeDirectory(employees_repo)
    holiday_service = HolidayService(holidays_repo)
    attendance_service = AttendanceService(attendance_repo, directory, clock=clock)
    roster_service = RosterService(directory, attendance_repo, holiday_service)

    return Container(
        conn=conn,
        clock=clock,
        employees_repo=employees_repo,
        holidays_repo=holidays_repo,
        attendance_repo=attendance_repo,
        directory=directory,
        holiday_service=holiday_service,
        attendance_service=attendance_service,
        roster_service=roster_service,
    )


def build_container(*, db_config: dict, utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        clock=CalendarClock(utc_offset_minutes),
        conn=conn,
    )
