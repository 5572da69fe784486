"""
Tests for the instance volume histogram (handlers/log_reader/histogram.py)
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from function_log_reader.core.time_bucket import from_ticks, to_ticks
from function_log_reader.handlers.log_reader.histogram import bucket_index, reduce_volume
from function_log_reader.models import InstanceCountRow
from tests.helpers.log_rows import instance_count_item

START = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def count_row(moment: datetime, count: int, size: int = 1, container_name: str = "container-a") -> InstanceCountRow:
    return InstanceCountRow.from_dynamodb_item(
        instance_count_item(to_ticks(moment), count, size, container_name)
    )


class TestBucketIndex:
    """Test histogram cell selection."""

    def test_first_and_last_cells(self):
        assert bucket_index(0, 0, 10.0, 3) == 0
        assert bucket_index(29, 0, 10.0, 3) == 2

    def test_index_past_last_cell_is_clamped(self):
        """Float rounding can produce index N for a tick just below end."""
        assert bucket_index(30, 0, 10.0, 3) == 2

    def test_fractional_width(self):
        # 10 ticks in 3 buckets: edges at 0, 3.33, 6.67
        width = 10 / 3
        assert [bucket_index(t, 0, width, 3) for t in range(10)] == [0, 0, 0, 0, 1, 1, 1, 2, 2, 2]


class TestReduceVolume:
    """Test reducing instance count samples to N buckets."""

    def test_three_bucket_example(self):
        end = START + timedelta(minutes=3)
        rows = [
            count_row(START, 2, size=3),
            count_row(START + timedelta(minutes=1), 5),
            count_row(START + timedelta(minutes=2, seconds=30), 4),
        ]

        samples = reduce_volume(rows, START, end, 3)

        assert [(sample.time, sample.value) for sample in samples] == [
            (START, 6),
            (START + timedelta(minutes=1), 5),
            (START + timedelta(minutes=2), 4),
        ]

    def test_always_returns_n_samples(self):
        samples = reduce_volume([], START, START + timedelta(hours=1), 7)

        assert len(samples) == 7
        assert all(sample.value == 0 for sample in samples)

    def test_sample_times_split_window_evenly(self):
        end = START + timedelta(minutes=10)

        samples = reduce_volume([], START, end, 4)

        assert [sample.time for sample in samples] == [
            START + timedelta(minutes=2.5) * i for i in range(4)
        ]

    def test_last_tick_before_end_lands_in_last_bucket(self):
        end = START + timedelta(minutes=3)
        rows = [count_row(from_ticks(to_ticks(end) - 1), 9)]

        samples = reduce_volume(rows, START, end, 3)

        assert samples[-1].value == 9

    def test_identical_ticks_are_summed(self):
        end = START + timedelta(minutes=1)
        rows = [
            count_row(START + timedelta(seconds=10), 2, container_name="container-a"),
            count_row(START + timedelta(seconds=10), 3, container_name="container-b"),
        ]

        samples = reduce_volume(rows, START, end, 2)

        assert samples[0].value == 5

    def test_total_is_sum_of_count_times_size(self):
        end = START + timedelta(hours=1)
        rows = [
            count_row(START + timedelta(minutes=m, seconds=7), count=m % 4, size=1 + m % 3)
            for m in range(60)
        ]

        samples = reduce_volume(rows, START, end, 13)

        assert sum(sample.value for sample in samples) == sum(row.count * row.size for row in rows)

    def test_rows_outside_window_are_skipped(self, caplog):
        end = START + timedelta(minutes=2)
        rows = [
            count_row(START - timedelta(seconds=1), 100),
            count_row(START, 1),
            count_row(end, 100),
        ]

        with caplog.at_level(logging.WARNING):
            samples = reduce_volume(rows, START, end, 2)

        assert [sample.value for sample in samples] == [1, 0]
        assert "Dropped 2 instance count row(s)" in caplog.text

    def test_single_bucket_collects_everything(self):
        end = START + timedelta(seconds=1)
        rows = [count_row(START + timedelta(microseconds=us), 1) for us in (0, 1, 999_999)]

        samples = reduce_volume(rows, START, end, 1)

        assert [sample.value for sample in samples] == [3]
        assert samples[0].time == START

    @pytest.mark.parametrize("number_of_buckets", [1, 2, 5, 60, 61])
    def test_samples_are_in_time_order(self, number_of_buckets):
        samples = reduce_volume([], START, START + timedelta(minutes=1), number_of_buckets)

        times = [sample.time for sample in samples]
        assert times == sorted(times)
        assert times[0] == START
