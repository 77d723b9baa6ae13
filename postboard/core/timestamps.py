"""
Timestamps. Everything we store is UTC, but SQLite hands datetimes back
without a timezone.
"""

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)

    return value
