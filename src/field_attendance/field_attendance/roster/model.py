from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.coordinates import Coordinates
from ..common.datetime_utils import iso_or_none
from ..core.enums import AttendanceStatus, Department


@dataclass(frozen=True)
class RosterRow:
    """One line of the HR daily view; ``row_id`` is ``absent-<id>`` for synthetic rows."""

    row_id: str
    employee_id: str
    name: Optional[str]
    department: Department
    date: date
    status: AttendanceStatus
    work_mode_on_time: Optional[datetime] = None
    work_mode_off_time: Optional[datetime] = None
    total_hours: float = 0.0
    total_distance_travelled: float = 0.0
    starting_location: Optional[Coordinates] = None
    end_location: Optional[Coordinates] = None
    is_active: bool = False
    work_type: Optional[str] = None
    remarks: Optional[str] = None
    holiday_info: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "id": self.row_id,
            "employeeId": self.employee_id,
            "name": self.name,
            "department": self.department.label,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "workModeOnTime": iso_or_none(self.work_mode_on_time),
            "workModeOffTime": iso_or_none(self.work_mode_off_time),
            "totalHours": self.total_hours,
            "totalDistanceTravelled": self.total_distance_travelled,
            "startingLocation": self.starting_location.to_dict() if self.starting_location else None,
            "endLocation": self.end_location.to_dict() if self.end_location else None,
            "isActive": self.is_active,
            "workType": self.work_type,
            "remarks": self.remarks,
            "holidayInfo": self.holiday_info,
        }


@dataclass(frozen=True)
class RosterSummary:
    total: int
    present: int
    half_day: int
    early_leave: int
    absent: int
    active: int
    awaiting_approval: int
    holiday: int
    present_percentage: str

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "halfDay": self.half_day,
            "earlyLeave": self.early_leave,
            "absent": self.absent,
            "active": self.active,
            "awaitingApproval": self.awaiting_approval,
            "holiday": self.holiday,
            "presentPercentage": self.present_percentage,
        }
