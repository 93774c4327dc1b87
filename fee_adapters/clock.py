"""
Day boundary helpers.

UTC only: a fee day runs from 00:00:00 UTC to the next 00:00:00 UTC.
"""

from datetime import datetime, timezone

from fee_adapters.models import SECONDS_PER_DAY


def start_of_day(timestamp: int) -> int:
    """Epoch seconds of 00:00 UTC on the day containing `timestamp`."""
    return int(timestamp) // SECONDS_PER_DAY * SECONDS_PER_DAY


def day_window(timestamp: int) -> tuple[int, int]:
    """(start, end) epoch seconds of the UTC day containing `timestamp`."""
    start = start_of_day(timestamp)
    return start, start + SECONDS_PER_DAY


def format_day(timestamp: int) -> str:
    """ISO date of the UTC day containing `timestamp`."""
    return datetime.fromtimestamp(start_of_day(timestamp), tz=timezone.utc).date().isoformat()
