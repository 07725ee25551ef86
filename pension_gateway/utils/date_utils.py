"""Date manipulation utilities"""

from datetime import datetime, timezone

SECONDS_PER_DAY = 86_400


def from_unix_timestamp(seconds: int) -> datetime:
    """Convert a chain timestamp (unix seconds) to an aware UTC datetime"""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def seconds_to_days(seconds: int) -> int:
    """Whole days in a duration, remainder dropped"""
    return seconds // SECONDS_PER_DAY
