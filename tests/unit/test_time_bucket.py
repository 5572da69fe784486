"""
Tests for tick and time bucket arithmetic (core/time_bucket.py)
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from function_log_reader.core.time_bucket import (
    EPOCH,
    TICKS_PER_BUCKET,
    TIME_BUCKET_WIDTH,
    bucket_id_for,
    from_ticks,
    time_for,
    to_ticks,
)


class TestTicks:
    """Test tick conversion."""

    def test_epoch_is_tick_zero(self):
        assert to_ticks(EPOCH) == 0
        assert from_ticks(0) == EPOCH

    def test_one_tick_is_one_microsecond(self):
        assert to_ticks(EPOCH + timedelta(microseconds=1)) == 1
        assert to_ticks(EPOCH + timedelta(seconds=1)) == 1_000_000

    def test_naive_datetime_is_treated_as_utc(self):
        naive = datetime(2024, 1, 15, 10, 30)
        aware = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

        assert to_ticks(naive) == to_ticks(aware)

    def test_timezone_offset_is_honored(self):
        eastern = datetime(2024, 1, 15, 5, 30, tzinfo=ZoneInfo("America/New_York"))
        utc = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

        assert to_ticks(eastern) == to_ticks(utc)

    def test_round_trip_keeps_microseconds(self):
        moment = datetime(2024, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)

        assert from_ticks(to_ticks(moment)) == moment
        assert from_ticks(to_ticks(moment)).tzinfo == timezone.utc


class TestTimeBuckets:
    """Test one-minute time buckets."""

    def test_bucket_width(self):
        assert TIME_BUCKET_WIDTH == timedelta(minutes=1)
        assert TICKS_PER_BUCKET == 60_000_000

    def test_bucket_id_truncates_toward_bucket_start(self):
        assert bucket_id_for(EPOCH) == 0
        assert bucket_id_for(EPOCH + timedelta(seconds=59, microseconds=999999)) == 0
        assert bucket_id_for(EPOCH + timedelta(minutes=1)) == 1
        assert bucket_id_for(EPOCH + timedelta(minutes=1, seconds=30)) == 1

    def test_pre_epoch_timestamps_floor(self):
        """A microsecond before the epoch belongs to bucket -1, not bucket 0."""
        assert bucket_id_for(EPOCH - timedelta(microseconds=1)) == -1
        assert time_for(-1) == EPOCH - timedelta(minutes=1)

    def test_time_for_is_bucket_start(self):
        assert time_for(0) == EPOCH
        assert time_for(1440) == EPOCH + timedelta(days=1)

    @pytest.mark.parametrize("moment", [
        datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 15, 10, 30, 59, 999999, tzinfo=timezone.utc),
        datetime(1969, 12, 31, 23, 59, 30, tzinfo=timezone.utc),
    ])
    def test_timestamp_lies_inside_its_bucket(self, moment):
        start = time_for(bucket_id_for(moment))

        assert start <= moment < start + TIME_BUCKET_WIDTH

    def test_bucket_round_trip(self):
        assert bucket_id_for(time_for(28_400_000)) == 28_400_000
