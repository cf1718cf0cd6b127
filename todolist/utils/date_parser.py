"""
Date parsing utilities for converting user date input to datetimes
"""

import re
from datetime import datetime, timedelta
from typing import Optional
from todolist.utils.date_utils import get_current_datetime, normalize_datetime

RELATIVE_DAYS_PATTERN = re.compile(r"^(?:in|after)\s+(\d+)\s+days?$")


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_date(date_str: str) -> Optional[datetime]:
    """
    Parse user date input to a local, timezone-aware datetime

    Args:
        date_str: Date string (e.g., "today", "tomorrow", "in 3 days",
            "2024-11-05", "2024-11-05 10:00", "08.11.2025")

    Returns:
        Datetime (midnight for date-only input) or None if the input is not understood
    """
    if not date_str:
        return None

    original_date_str = date_str.strip()
    date_str_lower = " ".join(original_date_str.lower().split())

    today = _start_of_day(get_current_datetime())

    # Relative dates
    if date_str_lower == "today":
        return today

    if date_str_lower == "tomorrow":
        return today + timedelta(days=1)

    if date_str_lower == "day after tomorrow":
        return today + timedelta(days=2)

    if date_str_lower == "yesterday":
        return today - timedelta(days=1)

    if date_str_lower == "next week":
        return today + timedelta(weeks=1)

    match = RELATIVE_DAYS_PATTERN.match(date_str_lower)
    if match:
        return today + timedelta(days=int(match.group(1)))

    # Try parsing formats with time first, then date-only formats
    time_formats = [
        "%Y-%m-%d %H:%M:%S",  # 2025-11-08 10:00:00
        "%Y-%m-%d %H:%M",     # 2025-11-08 10:00
        "%d.%m.%Y %H:%M",     # 08.11.2025 10:00
    ]

    for fmt in time_formats:
        try:
            return normalize_datetime(datetime.strptime(original_date_str, fmt))
        except ValueError:
            continue

    date_formats = [
        "%Y-%m-%d",
        "%d.%m.%Y",
    ]

    for fmt in date_formats:
        try:
            return normalize_datetime(datetime.strptime(original_date_str, fmt))
        except ValueError:
            continue

    # Full ISO-8601 timestamps (with "T" and optional offset)
    if "t" in date_str_lower:
        try:
            return normalize_datetime(datetime.fromisoformat(original_date_str.replace("Z", "+00:00")))
        except ValueError:
            pass

    # If can't parse, return None
    return None
