"""
Time helpers for exchange timestamps.

Binance stamps events in epoch milliseconds; delivery and funding fields
use the same unit.
"""

from datetime import datetime, timezone

MS_PER_SECOND = 1000


def timestamp_to_datetime(ts: int, unit: str = "ms") -> datetime:
    """
    Epoch timestamp to an aware UTC datetime.

    Example:
        >>> timestamp_to_datetime(1704067200000)
        datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    seconds = ts / MS_PER_SECOND if unit == "ms" else ts
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def datetime_to_timestamp(dt: datetime, unit: str = "ms") -> int:
    """Datetime to an epoch timestamp; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    seconds = dt.timestamp()
    return int(seconds * MS_PER_SECOND) if unit == "ms" else int(seconds)
