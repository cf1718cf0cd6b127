"""
Centralized date/time utilities
All timestamps are local, timezone-aware and truncated to whole seconds
so that they survive the epoch-seconds JSON round-trip unchanged.
"""

from datetime import datetime
from typing import Optional


def get_current_datetime() -> datetime:
    """
    Get current local datetime, truncated to whole seconds

    Returns:
        Current timezone-aware datetime object
    """
    return datetime.now().astimezone().replace(microsecond=0)


def normalize_datetime(value: datetime) -> datetime:
    """
    Make a datetime timezone-aware (naive values are treated as local time)
    and drop sub-second precision

    Args:
        value: Datetime to normalize

    Returns:
        Normalized datetime
    """
    if value.tzinfo is None:
        value = value.astimezone()
    return value.replace(microsecond=0)


def to_epoch_seconds(value: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to integer seconds since the epoch"""
    if value is None:
        return None
    return int(normalize_datetime(value).timestamp())


def from_epoch_seconds(value: Optional[int]) -> Optional[datetime]:
    """Convert integer seconds since the epoch to a local datetime"""
    if value is None:
        return None
    return datetime.fromtimestamp(int(value)).astimezone()
