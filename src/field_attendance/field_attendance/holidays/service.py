from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import FrozenSet, Iterable, Optional, Sequence

from ..common.datetime_utils import month_bounds, year_bounds
from ..common.validators import require_non_empty
from ..core.enums import Department, HolidayStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import HolidayDescriptor
from .repository import HolidayRepository

logger = logging.getLogger(__name__)

ALL_DEPARTMENTS = "all"


def _parse_hhmm(value: Optional[str], default: time) -> time:
    v = (value or "").strip()
    if not v:
        return default
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")


def _parse_department(value: str) -> Department:
    try:
        return Department.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))


def _parse_departments(values: Optional[Iterable[str]]) -> FrozenSet[Department]:
    depts = frozenset(_parse_department(d) for d in (values or []))
    if not depts:
        raise ValidationError("At least one department must be selected")
    return depts


def _parse_status(value: str) -> HolidayStatus:
    try:
        return HolidayStatus(value)
    except ValueError:
        raise ValidationError("Invalid holiday status")


def _department_filter(value: Optional[str]) -> Optional[Department]:
    if not value or value.strip().lower() == ALL_DEPARTMENTS:
        return None
    return _parse_department(value)


class HolidayService:
    """Holiday registry: department-scoped holidays by date."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def _ensure_free(self, holiday_date: date, depts: FrozenSet[Department], *, exclude: Optional[int] = None) -> None:
        taken = sorted(
            d.value
            for h in self._holidays.find_by_date(holiday_date)
            if h.holiday_id != exclude
            for d in h.departments
            if d in depts
        )
        if taken:
            raise ConflictError(f"Holiday already exists for this date in departments: {', '.join(taken)}")

    def create_holiday(
        self,
        *,
        holiday_date: date,
        title: str,
        departments: Iterable[str],
        status: str,
        description: str = "",
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> int:
        title = require_non_empty(title, "Title")
        depts = _parse_departments(departments)
        holiday_status = _parse_status(status)

        start = _parse_hhmm(start_time, time(9, 0))
        end = _parse_hhmm(end_time, time(17, 0))
        if end <= start:
            raise ValidationError("End time must be after start time")

        self._ensure_free(holiday_date, depts)

        holiday_id = self._holidays.create(
            holiday_date=holiday_date,
            title=title,
            description=(description or "").strip(),
            status=holiday_status,
            departments=depts,
            start_time=start,
            end_time=end,
            created_by=created_by,
        )
        logger.info("Holiday %s created for %s (%s)", holiday_id, holiday_date, ", ".join(sorted(d.value for d in depts)))
        return holiday_id

    def update_holiday(
        self,
        holiday_id: int,
        *,
        holiday_date: Optional[date] = None,
        title: Optional[str] = None,
        departments: Optional[Iterable[str]] = None,
        status: Optional[str] = None,
        description: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> HolidayDescriptor:
        """Change only the supplied fields; the holiday never conflicts with itself."""

        current = self._holidays.get_by_id(int(holiday_id))
        if current is None:
            raise NotFoundError("Holiday not found")

        new_date = holiday_date or current.date
        new_title = require_non_empty(title, "Title") if title is not None else current.title
        depts = _parse_departments(departments) if departments is not None else current.departments
        new_status = _parse_status(status) if status is not None else current.status
        start = _parse_hhmm(start_time, current.start_time)
        end = _parse_hhmm(end_time, current.end_time)
        if end <= start:
            raise ValidationError("End time must be after start time")

        self._ensure_free(new_date, depts, exclude=current.holiday_id)

        updated = self._holidays.update(
            current.holiday_id,
            holiday_date=new_date,
            title=new_title,
            description=description.strip() if description is not None else current.description,
            status=new_status,
            departments=depts,
            start_time=start,
            end_time=end,
        )
        if not updated:
            raise NotFoundError("Holiday not found")
        logger.info("Holiday %s updated", current.holiday_id)
        return self._holidays.get_by_id(current.holiday_id)

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")
        logger.info("Holiday %s deleted", holiday_id)

    def holidays_on(self, holiday_date: date) -> Sequence[HolidayDescriptor]:
        return self._holidays.find_by_date(holiday_date)

    def list_range(self, *, start: date, end: date, department: Optional[str] = None) -> Sequence[HolidayDescriptor]:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        dept = _parse_department(department) if department else None
        return self._holidays.find_range(start_date=start, end_date=end, department=dept)

    def list_holidays(
        self,
        *,
        department: Optional[str] = None,
        month: Optional[str] = None,
        year: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Sequence[HolidayDescriptor]:
        """Holidays by date. The month window only applies when both month and year are given."""

        start = end = None
        if month and year:
            start, end = month_bounds(f"{year}-{month}")
        return self._holidays.find_filtered(
            department=_department_filter(department),
            start_date=start,
            end_date=end,
            status=_parse_status(status) if status else None,
        )

    def by_department(self, department: str, *, year: Optional[str] = None) -> Sequence[HolidayDescriptor]:
        start = end = None
        if year:
            start, end = year_bounds(year)
        return self._holidays.find_filtered(department=_parse_department(department), start_date=start, end_date=end)

    def check(self, *, department: str, holiday_date: date) -> Optional[HolidayDescriptor]:
        """First holiday on the date that covers the department, if any."""
        dept = _parse_department(department)
        for holiday in self._holidays.find_by_date(holiday_date):
            if holiday.applies_to(dept):
                return holiday
        return None
