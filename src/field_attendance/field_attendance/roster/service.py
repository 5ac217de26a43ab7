from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.constants import ABSENT_ROW_PREFIX
from ..core.enums import AttendanceStatus, Department
from ..employees.model import Employee, EmployeeRef
from ..employees.service import EmployeeDirectory
from ..holidays.model import HolidayDescriptor
from ..holidays.service import HolidayService
from .model import RosterRow, RosterSummary

logger = logging.getLogger(__name__)


def _holiday_for(department: Department, holidays: Sequence[HolidayDescriptor]) -> Optional[HolidayDescriptor]:
    for holiday in holidays:
        if holiday.applies_to(department):
            return holiday
    return None


def _row_from_record(record: AttendanceRecord, employee: Employee, holiday: Optional[HolidayDescriptor]) -> RosterRow:
    return RosterRow(
        row_id=str(record.attendance_id),
        employee_id=employee.ref.employee_id,
        name=employee.name,
        department=employee.department,
        date=record.work_date,
        status=AttendanceStatus.HOLIDAY if holiday else record.status,
        work_mode_on_time=record.work_mode_on_time,
        work_mode_off_time=record.work_mode_off_time,
        total_hours=record.total_work_duration or 0.0,
        total_distance_travelled=record.total_distance_travelled,
        starting_location=record.work_mode_on_coordinates,
        end_location=record.work_mode_off_coordinates,
        is_active=record.is_open,
        work_type=record.work_type,
        remarks=record.remarks,
        holiday_info=holiday.info() if holiday else None,
    )


def _synthetic_row(target_date: date, employee: Employee, holiday: Optional[HolidayDescriptor]) -> RosterRow:
    return RosterRow(
        row_id=f"{ABSENT_ROW_PREFIX}{employee.ref.employee_id}",
        employee_id=employee.ref.employee_id,
        name=employee.name,
        department=employee.department,
        date=target_date,
        status=AttendanceStatus.HOLIDAY if holiday else AttendanceStatus.ABSENT,
        holiday_info=holiday.info() if holiday else None,
    )


def reconcile_daily_roster(
    target_date: date,
    roster: Iterable[Employee],
    records: Iterable[AttendanceRecord],
    holidays: Sequence[HolidayDescriptor],
) -> list[RosterRow]:
    """Merge the roster with the day's records and holidays, one row per employee.

    The holiday overlay only changes the returned row, never the record.
    """

    by_employee: dict[EmployeeRef, AttendanceRecord] = {}
    for record in records:
        if record.work_date == target_date:
            by_employee.setdefault(record.employee, record)

    rows: list[RosterRow] = []
    for employee in roster:
        holiday = _holiday_for(employee.department, holidays)
        record = by_employee.get(employee.ref)
        if record:
            rows.append(_row_from_record(record, employee, holiday))
        else:
            rows.append(_synthetic_row(target_date, employee, holiday))
    return rows


def summarize_roster(rows: Sequence[RosterRow]) -> RosterSummary:
    counts = Counter(r.status for r in rows)
    total = len(rows)
    present = counts[AttendanceStatus.PRESENT]
    percentage = f"{present / total * 100:.1f}" if total else "0.0"
    return RosterSummary(
        total=total,
        present=present,
        half_day=counts[AttendanceStatus.HALF_DAY],
        early_leave=counts[AttendanceStatus.EARLY_LEAVE],
        absent=counts[AttendanceStatus.ABSENT],
        active=sum(1 for r in rows if r.is_active),
        awaiting_approval=counts[AttendanceStatus.AWAITING_APPROVAL],
        holiday=counts[AttendanceStatus.HOLIDAY],
        present_percentage=percentage,
    )


@dataclass(frozen=True)
class DailyRoster:
    date: date
    rows: list[RosterRow]
    summary: RosterSummary
    is_holiday: bool
    holiday_info: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "attendance": [r.to_dict() for r in self.rows],
            "summary": self.summary.to_dict(),
            "isHoliday": self.is_holiday,
            "holidayInfo": self.holiday_info,
        }


class RosterService:
    def __init__(self, directory: EmployeeDirectory, attendance: AttendanceRepository, holidays: HolidayService):
        self._directory = directory
        self._attendance = attendance
        self._holidays = holidays

    def daily_roster(self, target_date: date) -> DailyRoster:
        holidays = list(self._holidays.holidays_on(target_date))
        roster = self._directory.roster()
        records = self._attendance.list_for_date(target_date)

        rows = reconcile_daily_roster(target_date, roster, records, holidays)
        logger.debug("Daily roster %s: %d employees, %d records", target_date, len(rows), len(records))
        return DailyRoster(
            date=target_date,
            rows=rows,
            summary=summarize_roster(rows),
            is_holiday=bool(holidays),
            holiday_info=holidays[0].info() if holidays else None,
        )
