from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from ..common.coordinates import Coordinates
from ..core.enums import AttendanceStatus, Department
from ..employees.model import EmployeeRef
from .model import AttendanceRecord, TravelLog


class AttendanceRepository(Protocol):
    """Persistence for attendance records keyed by (employee, date).

    Every mutating call is a single conditional write: it returns False (or
    raises ConflictError for inserts) instead of overwriting when the record
    is not in the expected open/closed state.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee: EmployeeRef, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_open(
        self,
        *,
        employee: EmployeeRef,
        name: Optional[str],
        work_date: date,
        work_mode_on_time: datetime,
        coordinates: Coordinates,
        work_type: str,
        first_log: TravelLog,
    ) -> int:
        """Insert an Active record; raises ConflictError if one exists for the day."""

        raise NotImplementedError

    def reopen_closed(self, *, attendance_id: int, coordinates: Coordinates, log: TravelLog) -> bool:
        """Clear the off time of a closed record (guarded on it being closed)."""

        raise NotImplementedError

    def append_travel_log(self, *, attendance_id: int, log: TravelLog, total_distance: float) -> bool:
        """Append a sample to an open record and store the reported cumulative distance."""

        raise NotImplementedError

    def close_open(
        self,
        *,
        attendance_id: int,
        work_mode_off_time: datetime,
        coordinates: Optional[Coordinates],
        log: Optional[TravelLog],
        total_distance: Optional[float],
        total_work_duration: float,
        status: AttendanceStatus,
    ) -> bool:
        """Close an open record (guarded on it being open)."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
        approved_by: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def upsert_manual(
        self,
        *,
        employee: EmployeeRef,
        name: Optional[str],
        work_date: date,
        status: AttendanceStatus,
        description: Optional[str],
        work_type: str,
        approved_by: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee: EmployeeRef,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 30,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_closed(
        self,
        *,
        statuses: Collection[AttendanceStatus],
        work_date: Optional[date] = None,
        department: Optional[Department] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_filtered(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        department: Optional[Department] = None,
        status: Optional[AttendanceStatus] = None,
        employee_id: Optional[str] = None,
        limit: int = 100,
    ) -> Sequence[AttendanceRecord]:
        """Newest first by date, then by work-mode-on time."""

        raise NotImplementedError
