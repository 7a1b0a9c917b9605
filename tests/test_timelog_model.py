from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from timelog_model import (
    MAX_YEAR,
    TIMELOG_BITS,
    TIMELOG_MASKS,
    TIMELOG_SHIFTS,
    YEAR_BITS,
    YEAR_SHIFT,
    CalendarValue,
    TimeLogError,
    as_uint64,
    civil_from_days,
    days_from_civil,
    days_in_month,
    to_int64,
)


def test_layout_constants():
    assert list(TIMELOG_BITS.items()) == [("SECONDS", 6), ("MINUTES", 6), ("HOURS", 5), ("DAY", 5), ("MONTH", 4)]
    assert dict(TIMELOG_MASKS) == {"SECONDS": 0x3F, "MINUTES": 0x3F, "HOURS": 0x1F, "DAY": 0x1F, "MONTH": 0x0F}
    assert dict(TIMELOG_SHIFTS) == {"SECONDS": 0, "MINUTES": 6, "HOURS": 12, "DAY": 17, "MONTH": 22}
    assert YEAR_SHIFT == 26
    assert YEAR_BITS == 38
    assert MAX_YEAR == 2**38 - 1


def test_layout_constants_are_read_only():
    with pytest.raises(TypeError):
        TIMELOG_BITS["SECONDS"] = 7  # type: ignore[index]


def test_days_in_month_leap_rules():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 2) == 28
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(100000, 2) == 29
    assert days_in_month(2025, 4) == 30
    assert days_in_month(2025, 12) == 31
    with pytest.raises(ValueError):
        days_in_month(2025, 13)


def test_day_count_known_points():
    assert days_from_civil(1970, 1, 1) == 0
    assert days_from_civil(2000, 3, 1) == 11017
    assert days_from_civil(1969, 12, 31) == -1
    assert civil_from_days(0) == (1970, 1, 1)
    assert civil_from_days(11017) == (2000, 3, 1)
    assert civil_from_days(-1) == (1969, 12, 31)


def test_day_count_matches_datetime_ordinals():
    epoch = datetime(1970, 1, 1).toordinal()
    for y, m, d in [(1, 1, 1), (99, 12, 31), (1600, 2, 29), (2024, 2, 29), (9999, 12, 31)]:
        n = days_from_civil(y, m, d)
        assert n == datetime(y, m, d).toordinal() - epoch
        assert civil_from_days(n) == (y, m, d)


def test_day_count_rolls_over_like_a_normalizing_constructor():
    assert days_from_civil(2025, 4, 31) == days_from_civil(2025, 5, 1)
    assert days_from_civil(2025, 2, 29) == days_from_civil(2025, 3, 1)


def test_calendar_value_timestamp_and_back():
    cv = CalendarValue(2025, 5, 13, 15, 30, 45)
    ts = cv.timestamp()
    assert ts == int(datetime(2025, 5, 13, 15, 30, 45, tzinfo=timezone.utc).timestamp())
    assert CalendarValue.from_timestamp(ts) == cv
    assert CalendarValue(1970, 1, 1).timestamp() == 0
    assert CalendarValue.from_timestamp(0) == CalendarValue(1970, 1, 1)


def test_calendar_value_timestamp_normalizes():
    assert CalendarValue.from_timestamp(CalendarValue(2025, 13, 1).timestamp()) == CalendarValue(2026, 1, 1)
    assert CalendarValue.from_timestamp(CalendarValue(2025, 12, 31, 24, 0, 0).timestamp()) == CalendarValue(2026, 1, 1)


def test_is_valid():
    assert CalendarValue(2025, 5, 13, 15, 30, 45).is_valid()
    assert CalendarValue(100000, 2, 29).is_valid()
    assert not CalendarValue(0, 1, 1).is_valid()
    assert not CalendarValue(2025, 0, 1).is_valid()
    assert not CalendarValue(2025, 13, 1).is_valid()
    assert not CalendarValue(2025, 2, 29).is_valid()
    assert not CalendarValue(2025, 1, 1, 24, 0, 0).is_valid()
    assert not CalendarValue(2025, 1, 1, 0, 60, 0).is_valid()
    assert not CalendarValue(2025, 1, 1, 0, 0, 60).is_valid()


def test_from_datetime_normalizes_to_utc_and_drops_microseconds():
    minus5 = timezone(timedelta(hours=-5))
    dt = datetime(2025, 12, 31, 22, 0, 1, 500_000, tzinfo=minus5)
    assert CalendarValue.from_datetime(dt) == CalendarValue(2026, 1, 1, 3, 0, 1)
    assert CalendarValue.from_datetime(datetime(2025, 5, 13, 15, 30, 45)) == CalendarValue(2025, 5, 13, 15, 30, 45)


def test_to_datetime():
    dt = CalendarValue(2025, 5, 13, 15, 30, 45).to_datetime()
    assert dt == datetime(2025, 5, 13, 15, 30, 45, tzinfo=timezone.utc)
    with pytest.raises(TimeLogError):
        CalendarValue(100000, 1, 1).to_datetime()


def test_isoformat_year_width():
    assert CalendarValue(1, 2, 3, 4, 5, 6).isoformat() == "0001-02-03T04:05:06"
    assert CalendarValue(999, 1, 1).isoformat() == "0999-01-01T00:00:00"
    assert CalendarValue(2025, 5, 13, 15, 30, 45).isoformat() == "2025-05-13T15:30:45"
    assert str(CalendarValue(100000, 1, 1)) == "100000-01-01T00:00:00"


def test_calendar_value_is_immutable():
    cv = CalendarValue(2025, 5, 13)
    with pytest.raises(AttributeError):
        cv.year = 2026  # type: ignore[misc]
    assert cv == CalendarValue(2025, 5, 13, 0, 0, 0)


def test_int64_views():
    assert to_int64(0) == 0
    assert to_int64((1 << 63) - 1) == (1 << 63) - 1
    assert to_int64(1 << 63) == -(1 << 63)
    assert to_int64((1 << 64) - 1) == -1
    assert as_uint64(-1) == (1 << 64) - 1
    assert as_uint64(-(1 << 63)) == 1 << 63
    assert as_uint64(to_int64(123456789)) == 123456789


@pytest.mark.parametrize("v", [1 << 64, -(1 << 63) - 1])
def test_int64_views_reject_wider_values(v):
    with pytest.raises(TimeLogError):
        to_int64(v)
    with pytest.raises(TimeLogError):
        as_uint64(v)
