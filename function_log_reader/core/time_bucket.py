"""
Time bucket and tick arithmetic.

A tick is one microsecond counted from the Unix epoch (UTC). A time bucket is
a fixed one-minute slice of that timeline, identified by its integer index.
Both conversions truncate toward the start of the slice.
"""

from datetime import datetime, timedelta, timezone

from ..utils import to_utc

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TICK = timedelta(microseconds=1)
TIME_BUCKET_WIDTH = timedelta(minutes=1)
TICKS_PER_BUCKET = TIME_BUCKET_WIDTH // TICK


def to_ticks(timestamp: datetime) -> int:
    """Microseconds between the epoch and timestamp (naive means UTC)."""
    return (to_utc(timestamp) - EPOCH) // TICK


def from_ticks(ticks: int) -> datetime:
    """UTC datetime for a tick count."""
    return EPOCH + timedelta(microseconds=ticks)


def bucket_id_for(timestamp: datetime) -> int:
    """Index of the bucket containing timestamp.

    Floor division keeps pre-epoch timestamps in the bucket that starts
    at or before them.
    """
    return to_ticks(timestamp) // TICKS_PER_BUCKET


def time_for(bucket_id: int) -> datetime:
    """Start time of a bucket."""
    return from_ticks(bucket_id * TICKS_PER_BUCKET)
