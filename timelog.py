"""TimeLog codec: packed Int64 timestamps <-> calendar values (UTC).

  encode(value) -> int                      0 for any invalid input
  decode(tl)    -> CalendarValue | None     None for 0 or a malformed value
  render(tl)    -> "YYYY-MM-DDTHH:MM:SS"    "" for 0 or a malformed value

Packed 0 is the "no timestamp" sentinel: none of the three functions raise on
bad input. See timelog_model.py for the bit layout.

Decode does not trust the bit fields: it builds a normalized calendar value
from them (day 31 of April rolls into May 1st, hour 24 into the next day, ...)
and rejects the TimeLog if any field changed on the way.
"""

from __future__ import annotations

import logging
import re
from dataclasses import astuple
from datetime import datetime, timezone

from timelog_model import (
    INT64_MIN,
    MAX_YEAR,
    TIMELOG_BITS,
    TIMELOG_MASKS,
    TIMELOG_SHIFTS,
    UINT64_MAX,
    YEAR_BITS,
    YEAR_SHIFT,
    CalendarValue,
    TimeLogError,
    TimeLogFields,
    as_uint64,
    to_int64,
)

logger = logging.getLogger(__name__)

# Expanded ISO-8601 form for years datetime cannot hold, e.g. "+100000-01-01T00:00:00Z".
# A UTC offset is applied the same way fromisoformat + astimezone would.
_EXPANDED_ISO_RE = re.compile(
    r"^\+?(?P<year>\d{5,})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:\.\d+)?)?)?"
    r"(?:Z|(?P<sign>[+-])(?P<oh>\d{2}):?(?P<om>\d{2}))?$",
    re.IGNORECASE,
)


def parse_text(text: str) -> CalendarValue | None:
    """Parse an ISO-8601 date-time string into a UTC calendar value.

    Naive strings are taken as UTC, offsets are applied, fractional seconds
    are truncated. Returns None when the text is not a real date-time.
    """
    text = text.strip()
    if not text:
        return None

    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        try:
            return CalendarValue.from_datetime(dt)
        except OverflowError:
            # shifting to UTC left datetime's range (e.g. 0001-01-01T00:00+01:00)
            return None

    m = _EXPANDED_ISO_RE.match(text)
    if m is None:
        return None
    cv = CalendarValue(
        year=int(m["year"]),
        month=int(m["month"]),
        day=int(m["day"]),
        hour=int(m["hour"] or 0),
        minute=int(m["minute"] or 0),
        second=int(m["second"] or 0),
    )
    if not cv.is_valid():
        return None
    if m["sign"] is None:
        return cv

    oh, om = int(m["oh"]), int(m["om"])
    if oh > 23 or om > 59:
        return None
    offset = (oh * 3600 + om * 60) * (-1 if m["sign"] == "-" else 1)
    return CalendarValue.from_timestamp(cv.timestamp() - offset)


def _coerce(value: object) -> CalendarValue | None:
    if isinstance(value, CalendarValue):
        return value
    if isinstance(value, str):
        return parse_text(value)
    if isinstance(value, datetime):
        try:
            return CalendarValue.from_datetime(value)
        except OverflowError:
            return None
    return None


def encode(value: CalendarValue | datetime | str) -> int:
    """Pack a calendar value (or a datetime / ISO string) into a TimeLog.

    Fields are shifted into place without masking: an out-of-range field
    (minute 64, month 13, ...) bleeds into the bits of the next one.
    Returns 0 when the input is unusable, has a non-int field, has year, month
    or day 0, has a negative field, or does not fit in 64 bits.
    """
    cv = _coerce(value)
    if cv is None:
        logger.debug("encode: unusable input %r", value)
        return 0

    if any(isinstance(v, bool) or not isinstance(v, int) for v in astuple(cv)):
        logger.debug("encode: non-integer field in %r", cv)
        return 0
    if cv.year == 0 or cv.month == 0 or cv.day == 0:
        logger.debug("encode: year/month/day 0 in %r", cv)
        return 0
    if any(v < 0 for v in astuple(cv)):
        logger.debug("encode: negative field in %r", cv)
        return 0

    stored = {
        "SECONDS": cv.second,
        "MINUTES": cv.minute,
        "HOURS": cv.hour,
        "DAY": cv.day - 1,
        "MONTH": cv.month - 1,
    }

    tl = 0
    for name, v in stored.items():
        tl |= v << TIMELOG_SHIFTS[name]
    tl |= cv.year << YEAR_SHIFT

    if tl > UINT64_MAX:
        logger.debug("encode: %r does not fit in 64 bits (max year %d)", cv, MAX_YEAR)
        return 0
    return tl


def split_fields(tl: int) -> TimeLogFields:
    """Extract the raw stored sub-fields of a TimeLog.

    Accepts the unsigned value or its signed Int64 container; the year is
    always the unsigned magnitude of the top 38 bits.
    """
    u = as_uint64(tl)
    values = {name: (u >> TIMELOG_SHIFTS[name]) & TIMELOG_MASKS[name] for name in TIMELOG_BITS}
    return TimeLogFields(
        seconds=values["SECONDS"],
        minutes=values["MINUTES"],
        hours=values["HOURS"],
        day=values["DAY"],
        month=values["MONTH"],
        year=u >> YEAR_SHIFT,
    )


def decode(tl: int) -> CalendarValue | None:
    """Unpack a TimeLog into a calendar value, or None if it is not a real date-time."""
    if isinstance(tl, bool) or not isinstance(tl, int):
        return None
    if tl == 0:
        return None
    if not (INT64_MIN <= tl <= UINT64_MAX):
        logger.debug("decode: %d is not a 64-bit value", tl)
        return None

    f = split_fields(tl)
    month = f.month + 1
    day = f.day + 1
    # month/day can't reach 0 here (unsigned extraction), kept in line with encode
    if f.year == 0 or month == 0 or day == 0:
        logger.debug("decode: year/month/day 0 in %r", f)
        return None

    expected = CalendarValue(f.year, month, day, f.hours, f.minutes, f.seconds)
    built = CalendarValue.from_timestamp(expected.timestamp())
    if built != expected:
        logger.debug("decode: %s normalizes to %s, rejected", expected, built)
        return None
    return built


def render(tl: int) -> str:
    """Canonical text of a TimeLog: YYYY-MM-DDTHH:MM:SS (UTC, no zone suffix), "" if invalid."""
    cv = decode(tl)
    if cv is None:
        return ""
    return cv.isoformat()


def now() -> int:
    """Current UTC time as a TimeLog (truncated to the second)."""
    return encode(datetime.now(timezone.utc))


__all__ = [
    "TIMELOG_BITS",
    "TIMELOG_MASKS",
    "TIMELOG_SHIFTS",
    "YEAR_SHIFT",
    "YEAR_BITS",
    "MAX_YEAR",
    "CalendarValue",
    "TimeLogError",
    "TimeLogFields",
    "as_uint64",
    "to_int64",
    "parse_text",
    "encode",
    "decode",
    "render",
    "split_fields",
    "now",
]
