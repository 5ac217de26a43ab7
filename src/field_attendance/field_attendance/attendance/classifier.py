from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import DURATION_DECIMALS, HALF_DAY_MIN_HOURS, PRESENT_MIN_HOURS
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    total_work_duration: float


def duration_hours(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def classify_duration(hours: float) -> AttendanceStatus:
    """Map a worked duration to a status. First match wins; order matters."""

    if hours >= PRESENT_MIN_HOURS:
        return AttendanceStatus.PRESENT
    elif hours >= HALF_DAY_MIN_HOURS:
        return AttendanceStatus.HALF_DAY
    elif hours < HALF_DAY_MIN_HOURS:
        return AttendanceStatus.EARLY_LEAVE
    # Unreachable for real numbers; NaN lands here.
    return AttendanceStatus.APPROVED


def decide_on_close(work_mode_on_time: datetime, work_mode_off_time: datetime) -> StatusDecision:
    """Classify on the exact duration, report it rounded to 2 decimals."""

    hours = duration_hours(work_mode_on_time, work_mode_off_time)
    return StatusDecision(
        status=classify_duration(hours),
        total_work_duration=round(hours, DURATION_DECIMALS),
    )
