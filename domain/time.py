"""
Domain time utilities (pure).

Centralized timestamp validation plus the local calendar used to cut sales
into days, weeks, months and years.

Stored timestamps are always UTC. Calendar boundaries (midnight, start of week,
start of month) are computed in the seller's local time zone and converted back
to UTC before being compared against stored timestamps.
"""

from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

# Weekday names in the order insights enumerate them.
WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, reading naive values as UTC."""

    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_weekday(value: Any) -> int:
    """
    Resolve a weekday name ("sunday", "Mon", ...) to Python's numbering
    (Monday = 0 ... Sunday = 6).
    """

    text = str(value).strip().lower()
    for index, name in enumerate(_calendar.day_name):
        if name.lower() == text or name.lower()[:3] == text:
            return index
    raise ValueError(f"Unknown weekday: {value!r}")


@dataclass(frozen=True, slots=True)
class SalesCalendar:
    """
    Local calendar used for bucketing.

    tz: the seller's time zone.
    first_weekday: weekday that starts a week, Python numbering (Monday = 0).
    Defaults to UTC with weeks starting on Sunday.
    """

    tz: tzinfo = timezone.utc
    first_weekday: int = 6

    def local(self, value: datetime) -> datetime:
        return value.astimezone(self.tz)

    def local_date(self, value: datetime) -> date:
        return self.local(value).date()

    def _midnight(self, day: date) -> datetime:
        return datetime.combine(day, time(), tzinfo=self.tz).astimezone(timezone.utc)

    def start_of_day(self, value: datetime) -> datetime:
        return self._midnight(self.local_date(value))

    def start_of_week(self, value: datetime) -> datetime:
        day = self.local_date(value)
        offset = (day.weekday() - self.first_weekday) % 7
        return self._midnight(day - timedelta(days=offset))

    def start_of_month(self, value: datetime) -> datetime:
        return self._midnight(self.local_date(value).replace(day=1))

    def start_of_year(self, value: datetime) -> datetime:
        return self._midnight(self.local_date(value).replace(month=1, day=1))

    def is_same_day(self, a: datetime, b: datetime) -> bool:
        return self.local_date(a) == self.local_date(b)

    def add_days(self, value: datetime, days: int) -> datetime:
        """Shift by whole calendar days, keeping the local wall-clock time."""

        local = self.local(value)
        shifted = datetime.combine(local.date() + timedelta(days=days), local.timetz())
        return shifted.astimezone(timezone.utc)

    def add_months(self, value: datetime, months: int) -> datetime:
        """
        Shift by calendar months, keeping the local wall-clock time.

        The day of month is clamped to the length of the target month
        (Mar 31 minus one month is Feb 28/29).
        """

        local = self.local(value)
        month_index = local.year * 12 + (local.month - 1) + months
        year, month = divmod(month_index, 12)
        month += 1
        day = min(local.day, _calendar.monthrange(year, month)[1])
        shifted = datetime.combine(date(year, month, day), local.timetz())
        return shifted.astimezone(timezone.utc)

    def weekday_index(self, value: datetime) -> int:
        """Weekday of a timestamp, Sunday = 0 ... Saturday = 6."""

        return (self.local(value).weekday() + 1) % 7
