"""
Timezone-aware interval arithmetic used by every scheduling stage.

All instants handled here are aware datetimes normalised to UTC. Wall-clock
composition (calendar date + "HH:MM") happens in the user's zone and is then
converted, so minute arithmetic stays absolute across DST transitions.
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from study_planner.models import WEEKDAYS

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


class InvalidTimeError(ValueError):
    """Raised for malformed or out-of-range HH:MM strings."""


def parse_hhmm(value: str) -> time:
    """Parse a 24-hour "HH:MM" string. Raises InvalidTimeError on bad input."""
    if not isinstance(value, str):
        raise InvalidTimeError(f"expected HH:MM string, got {value!r}")
    match = _HHMM.match(value)
    if not match:
        raise InvalidTimeError(f"invalid HH:MM value: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeError(f"HH:MM value out of range: {value!r}")
    return time(hour, minute)


def to_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def add_minutes(instant: datetime, minutes: float) -> datetime:
    return to_utc(instant) + timedelta(minutes=minutes)


def is_after(a: datetime, b: datetime) -> bool:
    return to_utc(a) > to_utc(b)


def is_before(a: datetime, b: datetime) -> bool:
    return to_utc(a) < to_utc(b)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open [start, end) overlap test."""
    return a_start < b_end and b_start < a_end


def minutes_between(start: datetime, end: datetime) -> float:
    return (to_utc(end) - to_utc(start)).total_seconds() / 60


def host_timezone() -> tzinfo:
    return datetime.now().astimezone().tzinfo or timezone.utc


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return the IANA zone for `name`, or the host zone when missing/unknown."""
    if not name:
        return host_timezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        logger.warning("Unknown timezone %r, falling back to host timezone: %s", name, e)
        return host_timezone()


def at_local_time(day: date, hhmm: str, tz: tzinfo) -> datetime:
    """Combine a calendar date with an HH:MM wall-clock time in `tz`, as a UTC instant."""
    local = datetime.combine(day, parse_hhmm(hhmm), tzinfo=tz)
    return local.astimezone(timezone.utc)


def local_date(instant: datetime, tz: tzinfo) -> date:
    return to_utc(instant).astimezone(tz).date()


def local_hour(instant: datetime, tz: tzinfo) -> int:
    return to_utc(instant).astimezone(tz).hour


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def js_weekday(day: date) -> int:
    """Day index with 0=Sunday .. 6=Saturday, as used by TimeConstraint.days."""
    return (day.weekday() + 1) % 7


def format_in_timezone(instant: datetime, tz: tzinfo) -> str:
    """Short human label such as "Mar 5, 2:30 PM"."""
    local = to_utc(instant).astimezone(tz)
    hour12 = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local:%b} {local.day}, {hour12}:{local:%M} {meridiem}"
