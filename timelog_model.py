"""TimeLog core data model (format-agnostic).

Bit layout of a packed TimeLog (Int64), least significant field first:

  - seconds: 6 bits  (offset 0)
  - minutes: 6 bits  (offset 6)
  - hours:   5 bits  (offset 12)
  - day:     5 bits  (offset 17), stored 0-indexed
  - month:   4 bits  (offset 22), stored 0-indexed
  - year:    remaining 38 bits (offset 26), unsigned, no offset

This module holds the layout constants, the calendar value dataclass and the
proleptic Gregorian arithmetic. Packing/unpacking lives in timelog.py.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType

TIMELOG_BITS = MappingProxyType(
    {
        "SECONDS": 6,
        "MINUTES": 6,
        "HOURS": 5,
        "DAY": 5,
        "MONTH": 4,
    }
)

TIMELOG_MASKS = MappingProxyType({name: (1 << bits) - 1 for name, bits in TIMELOG_BITS.items()})


def _cumulative_shifts() -> dict[str, int]:
    out: dict[str, int] = {}
    shift = 0
    for name, bits in TIMELOG_BITS.items():
        out[name] = shift
        shift += bits
    return out


TIMELOG_SHIFTS = MappingProxyType(_cumulative_shifts())

YEAR_SHIFT = sum(TIMELOG_BITS.values())  # 26
YEAR_BITS = 64 - YEAR_SHIFT  # 38
MAX_YEAR = (1 << YEAR_BITS) - 1

INT64_MIN = -(1 << 63)
UINT64_MAX = (1 << 64) - 1

SECONDS_PER_DAY = 86_400

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class TimeLogError(ValueError):
    pass


def as_uint64(v: int) -> int:
    """Unsigned view of a 64-bit value given either as unsigned or as signed Int64."""
    if not (INT64_MIN <= v <= UINT64_MAX):
        raise TimeLogError(f"not a 64-bit value: {v}")
    return v & UINT64_MAX


def to_int64(v: int) -> int:
    """Signed Int64 container of a 64-bit value (two's complement)."""
    u = as_uint64(v)
    return u - (1 << 64) if u >> 63 else u


# --- Proleptic Gregorian arithmetic ----------------------------------------


def days_in_month(year: int, month: int) -> int:
    if not (1 <= month <= 12):
        raise ValueError(f"month must be in [1..12], got {month}")
    if month == 2 and calendar.isleap(year):
        return 29
    return _DAYS_IN_MONTH[month - 1]


def days_from_civil(y: int, m: int, d: int) -> int:
    """Days since 1970-01-01 for a civil date (any integer year, m in [1..12]).

    Days beyond the end of the month are not rejected: they count forward
    into the following months, the same way a normalizing date constructor
    rolls them over.
    """
    y -= m <= 2
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (m + (-3 if m > 2 else 9)) + 2) // 5 + d - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146_097 + doe - 719_468


def civil_from_days(z: int) -> tuple[int, int, int]:
    """Inverse of days_from_civil: (year, month, day) for days since 1970-01-01."""
    z += 719_468
    era = z // 146_097
    doe = z - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    d = doy - (153 * mp + 2) // 5 + 1
    m = mp + (3 if mp < 10 else -9)
    return (yoe + era * 400 + (m <= 2), m, d)


# --- Data model --------------------------------------------------------------


@dataclass(frozen=True)
class CalendarValue:
    """A civil UTC date-time with one-second precision.

    Fields are stored as given; is_valid() tells whether they form a real
    date-time. The year is not limited to datetime's 1..9999 range.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @classmethod
    def from_datetime(cls, dt: datetime) -> CalendarValue:
        """Naive datetimes are taken as UTC; aware ones are converted. Microseconds are dropped."""
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    @classmethod
    def from_timestamp(cls, seconds: int) -> CalendarValue:
        days, rem = divmod(seconds, SECONDS_PER_DAY)
        y, m, d = civil_from_days(days)
        hh, rem = divmod(rem, 3600)
        mm, ss = divmod(rem, 60)
        return cls(y, m, d, hh, mm, ss)

    def timestamp(self) -> int:
        """POSIX seconds.

        Out-of-range fields are normalized (month 13 is January of the next
        year, second 60 is the next minute, ...).
        """
        y = self.year + (self.month - 1) // 12
        m = (self.month - 1) % 12 + 1
        days = days_from_civil(y, m, self.day)
        return days * SECONDS_PER_DAY + self.hour * 3600 + self.minute * 60 + self.second

    def is_valid(self) -> bool:
        if self.year < 1 or not (1 <= self.month <= 12):
            return False
        if not (1 <= self.day <= days_in_month(self.year, self.month)):
            return False
        return 0 <= self.hour < 24 and 0 <= self.minute < 60 and 0 <= self.second < 60

    def to_datetime(self) -> datetime:
        if not (1 <= self.year <= 9999):
            raise TimeLogError(f"year {self.year} is outside the datetime range")
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second, tzinfo=timezone.utc)

    def isoformat(self) -> str:
        # years >= 10000 keep their natural width
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True)
class TimeLogFields:
    """Raw stored sub-fields of a packed TimeLog (day and month still 0-indexed)."""

    seconds: int
    minutes: int
    hours: int
    day: int
    month: int
    year: int


__all__ = [
    "TIMELOG_BITS",
    "TIMELOG_MASKS",
    "TIMELOG_SHIFTS",
    "YEAR_SHIFT",
    "YEAR_BITS",
    "MAX_YEAR",
    "INT64_MIN",
    "UINT64_MAX",
    "TimeLogError",
    "CalendarValue",
    "TimeLogFields",
    "as_uint64",
    "to_int64",
    "days_in_month",
    "days_from_civil",
    "civil_from_days",
]
