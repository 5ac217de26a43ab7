from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ..core.constants import DEFAULT_UTC_OFFSET_MINUTES


class CalendarClock:
    """Single source of "now" and "today" for the engine.

    Times are returned as naive local datetimes in the configured offset so
    they can be stored in MySQL DATETIME columns as-is.
    """

    def __init__(self, utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES):
        self._tz = timezone(timedelta(minutes=int(utc_offset_minutes)))

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None, microsecond=0)

    def today(self) -> date:
        return self.now().date()


class FixedClock(CalendarClock):
    """Clock pinned to one instant (scripts and tests)."""

    def __init__(self, instant: datetime):
        super().__init__()
        self._instant = instant

    def now(self) -> datetime:
        return self._instant
