"""
LocalStack Integration Tests for the Function Log Reader

These tests run the reader against a real DynamoDB API served by LocalStack,
beyond what moto emulates: table creation through the waiter, 1 MB paging
and FilterExpression evaluation on the service side.

They are skipped unless LocalStack is already running on localhost:4566.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from function_log_reader import FunctionInstanceStatus, LogReader, RecentFunctionQuery, iterate_segments
from function_log_reader.core.time_bucket import to_ticks
from tests.helpers.log_rows import instance_count_item, instance_detail_item, recent_item

pytestmark = pytest.mark.integration


@pytest.fixture
def localstack_reader(localstack_config):
    """Reader over a freshly named table, created on construction."""
    config = localstack_config.model_copy(update={"table_name": f"function_logs_{uuid.uuid4().hex[:8]}"})
    reader = LogReader(config)
    yield reader
    reader.gateway.table.delete()


@pytest.fixture
def put_items(localstack_reader):
    def _put(*items):
        with localstack_reader.gateway.table.batch_writer() as batch:
            for item in items:
                batch.put_item(Item=item)
    return _put


class TestLocalStackLogReader:
    """End-to-end reads against LocalStack DynamoDB."""

    def test_lookup_round_trip(self, localstack_reader, put_items):
        instance_id = str(uuid.uuid4())
        started = datetime.now(timezone.utc).replace(microsecond=0)
        put_items(instance_detail_item(instance_id, "Resize", started, end_time=started + timedelta(seconds=1)))

        item = localstack_reader.lookup_function_instance(instance_id)

        assert item is not None
        assert item.start_time == started
        assert item.status == FunctionInstanceStatus.SUCCESS

    def test_volume_over_many_rows(self, localstack_reader, put_items):
        start = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        put_items(*[
            instance_count_item(to_ticks(start + timedelta(seconds=s)), 1, container_name=f"container-{s % 7}")
            for s in range(600)
        ])

        samples = localstack_reader.get_volume(start, start + timedelta(minutes=10), 10)

        assert [sample.value for sample in samples] == [60] * 10

    def test_filtered_recent_instances_drain(self, localstack_reader, put_items):
        start = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        statuses = ["failed" if n % 3 == 0 else "success" for n in range(30)]
        put_items(*[
            recent_item("resize", str(uuid.uuid4()), start + timedelta(seconds=n), status=status)
            for n, status in enumerate(statuses)
        ])
        query = RecentFunctionQuery(
            function_name="resize",
            start=start,
            end=start + timedelta(hours=1),
            max_results=4,
            status=FunctionInstanceStatus.FAILED
        )

        entries = list(iterate_segments(
            lambda token: localstack_reader.get_recent_function_instances(query, token)
        ))

        assert len(entries) == statuses.count("failed")
        assert [e.start_time for e in entries] == sorted((e.start_time for e in entries), reverse=True)
