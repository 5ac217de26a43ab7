from __future__ import annotations

from datetime import date, time
from typing import FrozenSet, Optional, Protocol, Sequence

from ..core.enums import Department, HolidayStatus
from .model import HolidayDescriptor


class HolidayRepository(Protocol):
    def get_by_id(self, holiday_id: int) -> Optional[HolidayDescriptor]:
        raise NotImplementedError

    def find_by_date(self, holiday_date: date) -> Sequence[HolidayDescriptor]:
        raise NotImplementedError

    def find_range(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[Department] = None,
    ) -> Sequence[HolidayDescriptor]:
        raise NotImplementedError

    def find_filtered(
        self,
        *,
        department: Optional[Department] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[HolidayStatus] = None,
    ) -> Sequence[HolidayDescriptor]:
        """Holidays ordered by date; every filter is optional."""

        raise NotImplementedError

    def create(
        self,
        *,
        holiday_date: date,
        title: str,
        description: str,
        status: HolidayStatus,
        departments: FrozenSet[Department],
        start_time: time,
        end_time: time,
        created_by: Optional[str] = None,
    ) -> int:
        """Insert a holiday; a department already booked on that date raises ConflictError."""

        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError

    def update(
        self,
        holiday_id: int,
        *,
        holiday_date: date,
        title: str,
        description: str,
        status: HolidayStatus,
        departments: FrozenSet[Department],
        start_time: time,
        end_time: time,
    ) -> bool:
        """Replace a holiday and its departments; False when it does not exist."""

        raise NotImplementedError
