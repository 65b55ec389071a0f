"""
Date helpers for standup keys and user-facing schedule strings.

Every stored record is keyed by the UTC midnight of its standup day, so
lookups are deterministic regardless of the caller's timezone. Printing is
locale-fixed: no strftime %p or %-d, which depend on platform and locale.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.errors import InvalidDateTimeError, UnknownTimezoneError

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"\d{2}:\d{2}")
RECORD_LIFETIME = timedelta(days=1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def zero_utc(value: datetime) -> datetime:
    """Truncate to midnight UTC. Naive datetimes are taken to be UTC."""
    return _as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def time_to_live_for(standup_date: datetime) -> datetime:
    """Exclusive expiry boundary: one day after the (zeroed) standup date."""
    return zero_utc(standup_date) + RECORD_LIFETIME


def to_epoch_millis(value: datetime) -> int:
    return int(_as_utc(value).timestamp() * 1000)


def from_epoch_millis(epoch_millis: Union[int, float]) -> datetime:
    return datetime.fromtimestamp(epoch_millis / 1000, tz=timezone.utc)


def get_zone(name: str) -> ZoneInfo:
    """Resolve an IANA name, raising UnknownTimezoneError instead of zoneinfo errors."""
    if not name:
        raise UnknownTimezoneError(name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise UnknownTimezoneError(name) from e


def offset_for_zone(name: str, at: Optional[datetime] = None) -> int:
    """UTC offset of the named zone in minutes, at `at` (default: now)."""
    zone = get_zone(name)
    moment = _as_utc(at) if at else datetime.now(timezone.utc)
    offset = moment.astimezone(zone).utcoffset() or timedelta(0)
    return int(offset.total_seconds() // 60)


def combine_date_time_in_zone(date_str: str, time_str: str, zone_name: str) -> int:
    """
    Interpret a local wall-clock date and time in `zone_name`.

    Args:
        date_str: "YYYY-MM-DD"
        time_str: "HH:mm"
        zone_name: IANA timezone name, e.g. "America/Denver".

    Returns:
        The corresponding UTC instant in epoch milliseconds.

    Raises:
        InvalidDateTimeError: if either string is malformed.
        UnknownTimezoneError: if the zone cannot be resolved.
    """
    zone = get_zone(zone_name)
    local = parse_local_date_time(date_str, time_str)
    return to_epoch_millis(local.replace(tzinfo=zone))


def parse_local_date_time(date_str: str, time_str: str) -> datetime:
    """
    Parse a zero-padded "YYYY-MM-DD" / "HH:mm" pair into a naive wall-clock time.

    Raises:
        InvalidDateTimeError: on any other shape or an out-of-range value.
    """
    error = InvalidDateTimeError(
        f"Invalid schedule date/time: {date_str!r} {time_str!r}"
    )
    if not isinstance(date_str, str) or not isinstance(time_str, str):
        raise error
    if not DATE_PATTERN.fullmatch(date_str) or not TIME_PATTERN.fullmatch(time_str):
        raise error
    try:
        return datetime.strptime(
            f"{date_str} {time_str}", f"{DATE_FORMAT} {TIME_FORMAT}"
        )
    except ValueError as e:
        raise error from e


def _in_zone(epoch_millis: Union[int, float], zone: Union[str, int]) -> datetime:
    instant = from_epoch_millis(epoch_millis)
    if isinstance(zone, str):
        return instant.astimezone(get_zone(zone))
    return instant.astimezone(timezone(timedelta(minutes=zone)))


def _print_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def print_in_zone(epoch_millis: Union[int, float], zone: Union[str, int]) -> str:
    """Format as "M/D/YYYY at h:mm AM" in a named zone or a fixed offset in minutes."""
    local = _in_zone(epoch_millis, zone)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{_print_date(local)} at {hour}:{local.minute:02d} {meridiem}"


def format_utc_date(epoch_millis: Union[int, float]) -> str:
    return _print_date(from_epoch_millis(epoch_millis))
