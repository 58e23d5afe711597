from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_SITE_TIMEZONE
from ..core.exceptions import ValidationError

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$")
_SHIFT_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def site_zone(name: Optional[str] = None) -> ZoneInfo:
    """Resolve the configured site timezone, falling back to the default site."""
    try:
        return ZoneInfo(name or DEFAULT_SITE_TIMEZONE)
    except ZoneInfoNotFoundError:
        raise ValidationError(f"Unknown timezone: {name}", code="INVALID_TIMEZONE")


def parse_iso_date(value) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    v = (value or "").strip() if isinstance(value, str) else ""
    if not _DATE_RE.match(v):
        raise ValidationError("Invalid date format (YYYY-MM-DD required)", code="INVALID_DATE_FORMAT")
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date format (YYYY-MM-DD required)", code="INVALID_DATE_FORMAT")


def parse_time(value) -> time:
    """Parse H:mm, HH:mm or HH:mm:ss into a time of day."""
    if isinstance(value, time):
        return value
    v = (value or "").strip() if isinstance(value, str) else ""
    m = _TIME_RE.match(v)
    if not m:
        raise ValidationError("Invalid time format (HH:mm or HH:mm:ss)", code="INVALID_TIME_FORMAT")
    return time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))


def parse_shift_time(value) -> time:
    """Shift boundaries are entered as HH:MM only."""
    v = (value or "").strip() if isinstance(value, str) else ""
    m = _SHIFT_TIME_RE.match(v)
    if not m:
        raise ValidationError("Invalid time format (HH:MM expected)", code="INVALID_TIME_FORMAT")
    return time(int(m.group(1)), int(m.group(2)))


def duration_hours(clock_in, clock_out) -> float:
    """Hours between two times of day, wrapping past midnight.

    When ``clock_out`` is earlier than ``clock_in`` the shift crossed midnight
    and 24h are added. Result is rounded to 2 decimals and lies in [0, 24).
    """
    start = parse_time(clock_in)
    end = parse_time(clock_out)
    anchor = date(2000, 1, 1)
    start_dt = datetime.combine(anchor, start)
    end_dt = datetime.combine(anchor, end)
    if end_dt < start_dt:
        end_dt += timedelta(days=1)
    return round((end_dt - start_dt).total_seconds() / 3600, 2)


def combine(day: date, at: time, zone: ZoneInfo) -> datetime:
    """Compose a site-local calendar day and time of day into an aware instant."""
    return datetime.combine(day, at, tzinfo=zone)


def clock_out_instant(day: date, clock_in: time, clock_out: time, zone: ZoneInfo) -> datetime:
    """Instant a shift ended, moved to the next day for overnight shifts."""
    end = combine(day, clock_out, zone)
    if clock_out < clock_in:
        end += timedelta(days=1)
    return end


def now_local(zone: ZoneInfo) -> datetime:
    """Current site-local time (wrapped so tests can patch it)."""
    return datetime.now(zone)


def today(zone: ZoneInfo) -> date:
    return now_local(zone).date()


def to_local(value: datetime, zone: ZoneInfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%Y-%m-%d") if value else None


def format_time(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None
