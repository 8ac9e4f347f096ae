"""
Local-time clock used by the booking rules and the weekly reset.

All "today" and "Sunday" decisions are taken in the configured local
timezone, never in UTC.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Protocol

import pytz

from studyroom.core.config import settings


class Clock(Protocol):
    """Source of the current local time."""

    @property
    def tz(self) -> pytz.BaseTzInfo: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in a pytz timezone."""

    def __init__(self, timezone_name: Optional[str] = None) -> None:
        self._tz = pytz.timezone(timezone_name or settings.timezone)

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


def local_today(clock: Clock) -> date:
    """Calendar day of ``clock`` in its local timezone."""
    return clock.now().date()


def local_midnight(tz: pytz.BaseTzInfo, day: date) -> datetime:
    """Timezone-aware 00:00:00 of ``day``."""
    return tz.localize(datetime(day.year, day.month, day.day))


def next_sunday_midnight(now: datetime, tz: pytz.BaseTzInfo) -> datetime:
    """
    Return the first Sunday 00:00:00 local time strictly after ``now``.

    When ``now`` is already a Sunday (even exactly midnight) the result is
    the following week's Sunday.
    """
    local_now = now.astimezone(tz)
    today = local_now.date()
    # date.weekday(): Monday=0 .. Sunday=6
    days_until_sunday = 6 - today.weekday()
    if days_until_sunday == 0:
        days_until_sunday = 7
    return local_midnight(tz, today + timedelta(days=days_until_sunday))
