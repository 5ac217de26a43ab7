from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.coordinates import Coordinates
from ..common.datetime_utils import iso_or_none
from ..core.enums import AttendanceStatus, Department, TravelLogType
from ..employees.model import EmployeeRef


@dataclass(frozen=True)
class TravelLog:
    timestamp: datetime
    coordinates: Coordinates
    distance_from_start: float
    log_type: TravelLogType = TravelLogType.SAMPLE

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "coordinates": self.coordinates.to_dict(),
            "distanceFromStart": self.distance_from_start,
            "type": self.log_type.value,
        }


@dataclass(frozen=True)
class TravelSample:
    """Location sample reported by the client while a session is open."""

    coordinates: Coordinates
    distance_from_start: float
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per day."""

    attendance_id: int
    employee: EmployeeRef
    name: Optional[str]
    work_date: date
    work_mode_on_time: Optional[datetime]
    work_mode_off_time: Optional[datetime]
    status: AttendanceStatus
    work_mode_on_coordinates: Optional[Coordinates] = None
    work_mode_off_coordinates: Optional[Coordinates] = None
    travel_logs: Tuple[TravelLog, ...] = field(default_factory=tuple)
    total_distance_travelled: float = 0.0
    total_work_duration: Optional[float] = None
    work_type: Optional[str] = None
    description: Optional[str] = None
    remarks: Optional[str] = None
    approved_by: Optional[str] = None

    @property
    def department(self) -> Department:
        return self.employee.department

    @property
    def is_open(self) -> bool:
        # HR-entered records never had a session, so they are not open.
        return self.work_mode_on_time is not None and self.work_mode_off_time is None

    @property
    def current_location(self) -> Optional[Coordinates]:
        if self.travel_logs:
            return self.travel_logs[-1].coordinates
        return self.work_mode_on_coordinates

    def to_dict(self) -> dict:
        return {
            "id": str(self.attendance_id),
            "employeeId": self.employee.employee_id,
            "employeeModel": self.employee.kind.value,
            "name": self.name,
            "department": self.department.label,
            "date": self.work_date.isoformat(),
            "workModeOnTime": iso_or_none(self.work_mode_on_time),
            "workModeOffTime": iso_or_none(self.work_mode_off_time),
            "workModeOnCoordinates": self.work_mode_on_coordinates.to_dict() if self.work_mode_on_coordinates else None,
            "workModeOffCoordinates": self.work_mode_off_coordinates.to_dict() if self.work_mode_off_coordinates else None,
            "travelLogs": [log.to_dict() for log in self.travel_logs],
            "totalDistanceTravelled": self.total_distance_travelled,
            "totalWorkDuration": self.total_work_duration,
            "status": self.status.value,
            "workType": self.work_type,
            "description": self.description,
            "remarks": self.remarks,
            "approvedBy": self.approved_by,
        }


@dataclass(frozen=True)
class SessionSummary:
    is_active: bool
    work_mode_on_time: Optional[datetime]
    status: AttendanceStatus
    work_type: Optional[str]
    total_distance_travelled: float = 0.0
    total_work_duration: Optional[float] = None
    work_mode_off_time: Optional[datetime] = None
    starting_location: Optional[Coordinates] = None
    end_location: Optional[Coordinates] = None

    @classmethod
    def of(cls, record: AttendanceRecord) -> "SessionSummary":
        return cls(
            is_active=record.is_open,
            work_mode_on_time=record.work_mode_on_time,
            work_mode_off_time=record.work_mode_off_time,
            total_work_duration=None if record.is_open else record.total_work_duration,
            total_distance_travelled=record.total_distance_travelled,
            status=record.status,
            work_type=record.work_type,
            starting_location=record.work_mode_on_coordinates,
            end_location=record.work_mode_off_coordinates,
        )

    def to_dict(self) -> dict:
        out = {
            "isActive": self.is_active,
            "workModeOnTime": iso_or_none(self.work_mode_on_time),
            "totalWorkDuration": self.total_work_duration,
            "totalDistanceTravelled": self.total_distance_travelled,
            "status": self.status.value,
            "workType": self.work_type,
            "startingLocation": self.starting_location.to_dict() if self.starting_location else None,
        }
        if not self.is_active:
            out["workModeOffTime"] = iso_or_none(self.work_mode_off_time)
            out["endLocation"] = self.end_location.to_dict() if self.end_location else None
        return out
