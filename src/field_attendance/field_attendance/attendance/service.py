from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence, Union

from ..common.clock import CalendarClock
from ..common.coordinates import Coordinates, parse_coordinates
from ..common.datetime_utils import month_bounds
from ..common.validators import optional_text, require_non_negative
from ..core.constants import ABSENT_ROW_PREFIX, DEFAULT_HISTORY_LIMIT, HR_HISTORY_LIMIT, OFFICE_WORK
from ..core.enums import (
    MANUAL_ENTRY_STATUSES,
    PENDING_REVIEW_STATUSES,
    AttendanceStatus,
    Department,
    TravelLogType,
)
from ..core.exceptions import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import EmployeeRef
from ..employees.service import EmployeeDirectory
from .classifier import decide_on_close
from .model import AttendanceRecord, SessionSummary, TravelLog, TravelSample
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

CoordinatesInput = Union[Coordinates, Mapping[str, Any], None]


def _coordinates(value: CoordinatesInput) -> Coordinates:
    if isinstance(value, Coordinates):
        return value
    return parse_coordinates(value)


def _parse_status(value: Any, allowed) -> AttendanceStatus:
    try:
        status = AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")
    if status not in allowed:
        raise ValidationError("Invalid status")
    return status


def _parse_record_id(record_id: Any) -> int:
    text = str(record_id or "").strip()
    if text.startswith(ABSENT_ROW_PREFIX):
        raise InvalidOperationError("Cannot update status for absent records. Create attendance record first.")
    try:
        return int(text)
    except ValueError:
        raise NotFoundError("Attendance record not found")


def _parse_limit(limit: Any) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer")
    if value <= 0:
        raise ValidationError("limit must be positive")
    return value


class AttendanceService:
    """Work-mode session lifecycle and HR status overrides.

    One record per employee per calendar day. Opening on a day that already
    has a closed record extends that record instead of creating a new one.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: EmployeeDirectory,
        *,
        clock: CalendarClock | None = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._clock = clock or CalendarClock()

    def _now(self, now: datetime | None) -> datetime:
        return now or self._clock.now()

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    # --- session lifecycle -------------------------------------------------

    def open_session(
        self,
        ref: EmployeeRef,
        coordinates: CoordinatesInput,
        work_type: str | None = None,
        *,
        now: datetime | None = None,
    ) -> SessionSummary:
        coords = _coordinates(coordinates)
        employee = self._directory.lookup(ref)
        now = self._now(now)
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(ref, today)
        if existing:
            if existing.is_open:
                raise ConflictError("work mode already active")
            if existing.work_mode_on_time is None:
                raise ConflictError("attendance already recorded for today")

            log = TravelLog(
                timestamp=now,
                coordinates=coords,
                distance_from_start=existing.total_distance_travelled,
                log_type=TravelLogType.EXTEND,
            )
            if not self._attendance.reopen_closed(attendance_id=existing.attendance_id, coordinates=coords, log=log):
                raise ConflictError("work mode already active")
            logger.info("Work mode extended for %s on %s (record %s)", ref, today, existing.attendance_id)
            return SessionSummary.of(self._reload(existing.attendance_id))

        attendance_id = self._attendance.create_open(
            employee=ref,
            name=employee.name,
            work_date=today,
            work_mode_on_time=now,
            coordinates=coords,
            work_type=optional_text(work_type) or ref.kind.default_work_type,
            first_log=TravelLog(timestamp=now, coordinates=coords, distance_from_start=0.0, log_type=TravelLogType.START),
        )
        logger.info("Work mode on for %s on %s (record %s)", ref, today, attendance_id)
        return SessionSummary.of(self._reload(attendance_id))

    def append_travel_sample(
        self,
        ref: EmployeeRef,
        work_date: date,
        sample: TravelSample,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        distance = require_non_negative(sample.distance_from_start, "distanceFromStart")

        record = self._attendance.get_for_employee_and_date(ref, work_date)
        if not record or not record.is_open:
            raise NotFoundError("no active work session")

        log = TravelLog(
            timestamp=sample.timestamp or self._now(now),
            coordinates=sample.coordinates,
            distance_from_start=distance,
            log_type=TravelLogType.SAMPLE,
        )
        if not self._attendance.append_travel_log(attendance_id=record.attendance_id, log=log, total_distance=distance):
            raise NotFoundError("no active work session")
        return self._reload(record.attendance_id)

    def close_session(
        self,
        ref: EmployeeRef,
        coordinates: CoordinatesInput = None,
        total_distance: Optional[float] = None,
        *,
        now: datetime | None = None,
    ) -> SessionSummary:
        coords = _coordinates(coordinates) if coordinates is not None else None
        if total_distance is not None:
            total_distance = require_non_negative(total_distance, "totalDistance")

        now = self._now(now)
        record = self._attendance.get_for_employee_and_date(ref, now.date())
        if not record or record.work_mode_on_time is None:
            raise NotFoundError("no active work session")
        if not record.is_open:
            raise ConflictError("work mode already ended")

        decision = decide_on_close(record.work_mode_on_time, now)
        log = None
        if coords is not None:
            log = TravelLog(
                timestamp=now,
                coordinates=coords,
                distance_from_start=total_distance if total_distance is not None else record.total_distance_travelled,
                log_type=TravelLogType.END,
            )

        closed = self._attendance.close_open(
            attendance_id=record.attendance_id,
            work_mode_off_time=now,
            coordinates=coords,
            log=log,
            total_distance=total_distance,
            total_work_duration=decision.total_work_duration,
            status=decision.status,
        )
        if not closed:
            raise ConflictError("work mode already ended")

        logger.info(
            "Work mode off for %s (record %s): %.2fh -> %s",
            ref,
            record.attendance_id,
            decision.total_work_duration,
            decision.status.value,
        )
        return SessionSummary.of(self._reload(record.attendance_id))

    # --- HR review ---------------------------------------------------------

    def set_status(
        self,
        record_id: Any,
        status: Any,
        remarks: str | None = None,
        *,
        approved_by: str | None = None,
    ) -> AttendanceRecord:
        new_status = _parse_status(status, AttendanceStatus)
        attendance_id = _parse_record_id(record_id)

        updated = self._attendance.update_status(
            attendance_id=attendance_id,
            status=new_status,
            remarks=optional_text(remarks),
            approved_by=optional_text(approved_by),
        )
        if not updated:
            raise NotFoundError("Attendance record not found")

        logger.info("Attendance %s set to %s by %s", attendance_id, new_status.value, approved_by or "-")
        return self._reload(attendance_id)

    def approve(
        self,
        record_id: Any,
        status: Any = None,
        remarks: str | None = None,
        *,
        approved_by: str | None = None,
    ) -> AttendanceRecord:
        return self.set_status(
            record_id,
            status or AttendanceStatus.APPROVED.value,
            remarks,
            approved_by=approved_by,
        )

    def record_manual_attendance(
        self,
        ref: EmployeeRef,
        work_date: date,
        status: Any,
        description: str | None = None,
        work_type: str | None = None,
        approved_by: str | None = None,
    ) -> AttendanceRecord:
        new_status = _parse_status(status, MANUAL_ENTRY_STATUSES)
        employee = self._directory.lookup(ref)

        attendance_id = self._attendance.upsert_manual(
            employee=ref,
            name=employee.name,
            work_date=work_date,
            status=new_status,
            description=optional_text(description),
            work_type=optional_text(work_type) or OFFICE_WORK,
            approved_by=optional_text(approved_by),
        )
        logger.info("Manual attendance for %s on %s: %s", ref, work_date, new_status.value)
        return self._reload(attendance_id)

    # --- queries -----------------------------------------------------------

    def get_today(self, ref: EmployeeRef, *, today: date | None = None) -> Optional[SessionSummary]:
        record = self._attendance.get_for_employee_and_date(ref, today or self._clock.today())
        return SessionSummary.of(record) if record else None

    def get_active_session(self, ref: EmployeeRef, *, today: date | None = None) -> Optional[AttendanceRecord]:
        record = self._attendance.get_for_employee_and_date(ref, today or self._clock.today())
        if record and record.is_open:
            return record
        return None

    def history(
        self,
        ref: EmployeeRef,
        *,
        month: str | None = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        limit = _parse_limit(limit)
        start = end = None
        if month:
            start, end = month_bounds(month)
        return self._attendance.list_for_employee(ref, start_date=start, end_date=end, limit=limit)

    def pending_requests(
        self,
        *,
        work_date: date | None = None,
        department: str | None = None,
        status: str | None = None,
    ) -> Sequence[AttendanceRecord]:
        """Closed sessions still waiting for an HR decision."""

        statuses = PENDING_REVIEW_STATUSES
        if status:
            statuses = frozenset({_parse_status(status, PENDING_REVIEW_STATUSES)})

        dept = None
        if department:
            try:
                dept = Department.parse(department)
            except ValueError as e:
                raise ValidationError(str(e))

        return self._attendance.list_closed(statuses=statuses, work_date=work_date, department=dept)

    def hr_history(
        self,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        department: str | None = None,
        status: str | None = None,
        employee_id: str | None = None,
        limit: int = HR_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        """Records across all employees, newest first.

        The date window applies only when both ends are given; "all" disables
        the department and status filters.
        """

        limit = _parse_limit(limit)
        if not (start_date and end_date):
            start_date = end_date = None
        elif end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        dept = None
        if department and department.lower() != "all":
            try:
                dept = Department.parse(department)
            except ValueError as e:
                raise ValidationError(str(e))

        wanted = None
        if status and status.lower() != "all":
            wanted = _parse_status(status, AttendanceStatus)

        return self._attendance.list_filtered(
            start_date=start_date,
            end_date=end_date,
            department=dept,
            status=wanted,
            employee_id=optional_text(employee_id),
            limit=limit,
        )
