from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from src.staff_ledger.staff_ledger.common.datetime_utils import (
    clock_out_instant,
    combine,
    duration_hours,
    parse_iso_date,
    parse_shift_time,
    parse_time,
    site_zone,
)
from src.staff_ledger.staff_ledger.core.exceptions import ValidationError


def test_duration_same_day():
    assert duration_hours("09:00", "17:00") == 8.0


def test_duration_wraps_past_midnight():
    assert duration_hours("22:00:00", "06:00:00") == 8.0


def test_duration_rounded_to_two_decimals():
    assert duration_hours("09:00:00", "09:20:00") == 0.33


@pytest.mark.parametrize(
    "clock_in,clock_out",
    [("00:00", "23:59:59"), ("23:59:59", "00:00"), ("12:00", "12:00"), ("08:30", "08:29")],
)
def test_duration_stays_within_a_day(clock_in, clock_out):
    assert 0 <= duration_hours(clock_in, clock_out) <= 24


def test_parse_time_accepts_short_and_long_forms():
    assert parse_time("9:05") == time(9, 5)
    assert parse_time("09:05:30") == time(9, 5, 30)


@pytest.mark.parametrize("value", ["24:00", "9", "09:60", "", None, "abc"])
def test_parse_time_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc:
        parse_time(value)
    assert exc.value.code == "INVALID_TIME_FORMAT"


def test_shift_time_rejects_seconds():
    with pytest.raises(ValidationError):
        parse_shift_time("09:00:00")


def test_parse_iso_date():
    assert parse_iso_date("2024-01-10") == date(2024, 1, 10)
    assert parse_iso_date(datetime(2024, 1, 10, 23, 0)) == date(2024, 1, 10)
    with pytest.raises(ValidationError) as exc:
        parse_iso_date("10/01/2024")
    assert exc.value.code == "INVALID_DATE_FORMAT"


def test_combine_uses_site_offset():
    lagos = ZoneInfo("Africa/Lagos")
    instant = combine(date(2024, 1, 10), time(9, 0), lagos)
    assert instant.utcoffset().total_seconds() == 3600
    assert instant.isoformat() == "2024-01-10T09:00:00+01:00"


def test_clock_out_instant_moves_overnight_shift_to_next_day():
    lagos = ZoneInfo("Africa/Lagos")
    end = clock_out_instant(date(2024, 1, 10), time(22, 0), time(6, 0), lagos)
    assert end.date() == date(2024, 1, 11)


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError) as exc:
        site_zone("Mars/Olympus")
    assert exc.value.code == "INVALID_TIMEZONE"
