from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import FrozenSet, Optional

from ..core.enums import Department, HolidayStatus


@dataclass(frozen=True)
class HolidayDescriptor:
    """A holiday on one date, scoped to a set of departments."""

    holiday_id: int
    date: date
    title: str
    status: HolidayStatus
    departments: FrozenSet[Department] = field(default_factory=frozenset)
    description: str = ""
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    created_by: Optional[str] = None

    def applies_to(self, department: Department) -> bool:
        return department in self.departments

    def info(self) -> dict:
        """Overlay attached to roster rows."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "date": self.date.isoformat(),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "date": self.date.isoformat(),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "departments": sorted(d.value for d in self.departments),
            "startTime": self.start_time.strftime("%H:%M"),
            "endTime": self.end_time.strftime("%H:%M"),
            "createdBy": self.created_by,
        }
