"""
Clock and time-of-day helpers shared by the pipeline, detector and simulator.

All instants are handled as timezone-aware UTC datetimes. Clock hours used for
time-of-day rules are evaluated in the session's IANA timezone when one is
known, and in UTC otherwise.
"""

from datetime import datetime
from typing import Literal

import pytz

TimeCategory = Literal["morning", "midday", "evening", "night"]

HOURS_PER_DAY = 24


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 instant into an aware UTC datetime.

    Accepts a trailing "Z" as well as explicit offsets.

    Args:
        value: ISO-8601 string (e.g., "2026-01-15T20:00:00Z")

    Returns:
        Aware datetime in UTC
    """
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def format_iso(value: datetime) -> str:
    """Format an instant as ISO-8601 in UTC."""
    return ensure_utc(value).isoformat()


def to_local(value: datetime, tz_name: str | None = None) -> datetime:
    """Convert an instant to local time in the given IANA timezone (UTC if None)."""
    tz = pytz.timezone(tz_name) if tz_name else pytz.UTC
    return ensure_utc(value).astimezone(tz)


def local_hour(value: datetime, tz_name: str | None = None) -> int:
    """Clock hour (0-23) of an instant in the given timezone."""
    return to_local(value, tz_name).hour


def localize_clock_time(day: datetime, hour: int, tz_name: str | None = None) -> datetime:
    """
    Build the UTC instant for a local clock hour on the local date of `day`.

    Args:
        day: Any instant; only its local calendar date is used
        hour: Local clock hour (0-23)
        tz_name: IANA timezone name, UTC if None

    Returns:
        Aware UTC datetime at hour:00 local time
    """
    tz = pytz.timezone(tz_name) if tz_name else pytz.UTC
    local_date = to_local(day, tz_name).date()
    naive = datetime(local_date.year, local_date.month, local_date.day, hour)
    return tz.localize(naive).astimezone(pytz.UTC)


def is_morning(hour: int) -> bool:
    """Morning window (4-10 AM)."""
    return 4 <= hour < 10


def is_midday(hour: int) -> bool:
    """Midday window (10 AM - 5 PM)."""
    return 10 <= hour < 17


def is_evening(hour: int) -> bool:
    """Evening window (7 PM - 1 AM)."""
    return hour >= 19 or hour < 1


def time_category(hour: int) -> TimeCategory:
    """
    Bucket a clock hour into a time-of-day category.

    The same rule drives MSI weighting, phase-shift scaling, the health
    score's evening ratio and heuristic lighting detection.
    Hours 1-4 AM and 5-7 PM fall through to "night".
    """
    if is_morning(hour):
        return "morning"
    if is_evening(hour):
        return "evening"
    if is_midday(hour):
        return "midday"
    return "night"


def hour_in_window(hour: int, start_hour: int, end_hour: int) -> bool:
    """
    Check if a clock hour falls in the half-open window [start, end).

    Wraps past midnight when end < start. A window with start == end covers
    the whole day.
    """
    if start_hour == end_hour:
        return True
    if start_hour < end_hour:
        return start_hour <= hour < end_hour
    return hour >= start_hour or hour < end_hour


def duration_hours(start: datetime, end: datetime) -> float:
    """Elapsed hours between two instants."""
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def interpolate_from_map(table: dict[float, float], key: float) -> float:
    """
    Piecewise-linear lookup in a sorted numeric table.

    Keys outside the table range return the nearest endpoint value.
    """
    if not table:
        return 0.0

    keys = sorted(table)
    if key <= keys[0]:
        return table[keys[0]]
    if key >= keys[-1]:
        return table[keys[-1]]

    for lower, upper in zip(keys, keys[1:]):
        if lower <= key <= upper:
            return lerp(table[lower], table[upper], (key - lower) / (upper - lower))

    return table[keys[-1]]
