"""Timestamp utilities for UTC handling and display formatting.

Notification bodies show times in UTC so the same mail reads the same for
every admin regardless of where the process runs.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC, aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_display_datetime(dt: datetime) -> str:
    """Format a datetime for a notification body.

    Example:
        >>> format_display_datetime(datetime(2025, 11, 4, 12, 30, 5, tzinfo=timezone.utc))
        '2025-11-04 12:30:05 UTC'
    """
    return ensure_utc(dt).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_display_date(dt: datetime) -> str:
    """Format the calendar date of a datetime, without a time component.

    Example:
        >>> format_display_date(datetime(2025, 11, 4, 23, 59, tzinfo=timezone.utc))
        '2025-11-04'
    """
    return ensure_utc(dt).strftime("%Y-%m-%d")
