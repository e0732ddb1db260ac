"""
Time utilities for trade timestamps.

Trade feeds report wall-clock date and time strings without a zone. They
are interpreted in a configured timezone and converted to epoch
milliseconds, which is the only time representation the analytics use.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo


@lru_cache(maxsize=32)
def resolve_timezone(name: Optional[str] = "UTC") -> tzinfo:
    """Return the tzinfo for an IANA name; UTC when name is empty or 'UTC'."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def wall_clock_to_epoch_ms(year: int, month: int, day: int,
                           hours: int, minutes: int, seconds: int,
                           tz: tzinfo = timezone.utc) -> int:
    """
    Convert wall-clock components to epoch milliseconds.

    Time components past their natural range roll over into the next
    minute/hour/day rather than failing.
    """
    midnight = datetime(year, month, day, tzinfo=tz)
    moment = midnight + timedelta(hours=hours, minutes=minutes, seconds=seconds)
    return int(moment.timestamp() * 1000)


def epoch_ms_to_datetime(ts_ms: int, tz: tzinfo = timezone.utc) -> datetime:
    """Convert epoch milliseconds to an aware datetime."""
    return datetime.fromtimestamp(ts_ms / 1000.0, tz=tz)


def parse_calendar_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse an MM/DD/YYYY date, returning None when malformed."""
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str.strip(), "%m/%d/%Y")
    except ValueError:
        return None
