"""
Standardized Date/Time Handling Utilities

All calendar math in the insights engine (start of day, weekday, hour of
onset) goes through these helpers so it happens in one configured timezone.

RULES:
- Aware datetimes are converted to the configured timezone
- Naive datetimes are taken as already local wall-clock time
- Comparisons happen between naive local datetimes, never mixed
"""

import logging
from datetime import datetime, date, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from aurae import config

logger = logging.getLogger(__name__)

# Fallback if the configured timezone cannot be loaded
DEFAULT_TIMEZONE = "UTC"


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to UTC

    Args:
        tz_name: IANA name (defaults to config.TIMEZONE)

    Returns:
        ZoneInfo object
    """
    tz_str = tz_name or config.TIMEZONE or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Invalid timezone '{tz_str}', using {DEFAULT_TIMEZONE}: {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_local(tz: Optional[ZoneInfo] = None) -> datetime:
    """Current wall-clock time in the given (or configured) timezone, naive"""
    tz = tz or get_timezone()
    return datetime.now(tz).replace(tzinfo=None)


def to_local(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """
    Normalize a datetime to naive local wall-clock time

    Args:
        dt: Aware or naive datetime
        tz: Target timezone (defaults to configured timezone)

    Returns:
        Naive datetime in the target timezone
    """
    if dt.tzinfo is None:
        return dt
    tz = tz or get_timezone()
    return dt.astimezone(tz).replace(tzinfo=None)


def start_of_day(dt: Union[datetime, date]) -> date:
    """Calendar day of a local datetime"""
    if isinstance(dt, datetime):
        return dt.date()
    return dt


def weekday_index(dt: Union[datetime, date]) -> int:
    """
    Weekday number with Sunday first

    Returns:
        1 = Sunday, 2 = Monday ... 7 = Saturday
    """
    # date.weekday(): Monday=0 .. Sunday=6
    return (dt.weekday() + 1) % 7 + 1


def days_ago(reference: datetime, days: int) -> datetime:
    """Instant `days` whole days before reference"""
    return reference - timedelta(days=days)


def format_duration(seconds: Optional[float]) -> Optional[str]:
    """
    Format a duration as "2h 15m", "45m" or "3h"

    Args:
        seconds: Duration in seconds, or None

    Returns:
        Formatted string, or None when no duration is available
    """
    if seconds is None:
        return None

    total_minutes = max(0, int(seconds // 60))
    hours, minutes = divmod(total_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"
