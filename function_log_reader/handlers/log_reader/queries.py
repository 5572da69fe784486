"""
Function Log Read API

The single entry point for reading the function log table:

- Instance volume histogram over a time window
- Function definitions
- Container activation timeline
- Per-function aggregate statistics
- Recent executions of a function, newest first
- Full execution record by id

Paged methods return a Segment. Each call makes exactly one storage round
trip and hands back DynamoDB's LastEvaluatedKey, encoded as an opaque
token, whether the page is full, short, or empty. Replaying the token
resumes the scan; an absent token means the scan is complete.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from ...config import LogReaderConfig
from ...core import TableGateway, create_table_gateway, deserialize_token, serialize_token
from ...models import (
    ActivationEvent,
    AggregateEntry,
    AggregateStatRow,
    ContainerActivationRow,
    FunctionDefinitionRow,
    FunctionDefinitionView,
    FunctionInstanceLogItem,
    InstanceCountRow,
    InstanceDetailRow,
    LogRow,
    RecentFunctionQuery,
    RecentInstanceEntry,
    RecentInstanceRow,
    Segment,
    VolumeSample,
)
from ...exceptions import InvalidArgumentError
from ...utils import convert_model_to_user_timezone, to_user_timezone
from .histogram import reduce_volume
from .mapper import RowMapper, decode_as
from .scans import (
    activation_timeline_scan,
    aggregate_stats_scan,
    function_definitions_scan,
    instance_lookup_key,
    recent_instances_scan,
    require_time_range,
    volume_scan,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=LogRow)
V = TypeVar("V")


class LogReader:
    """
    Read-only API over the function log table.

    The table is ensured once, when the reader is built. Every method is
    independent: the only per-call state is the RowMapper and its intern map.
    """

    def __init__(self, config: LogReaderConfig, gateway: Optional[TableGateway] = None):
        """Initialize the reader and make sure the log table exists.

        Args:
            config: Log reader configuration
            gateway: Pre-built gateway (defaults to one for config.table_name)
        """
        self.config = config
        self.config.configure_logging()
        self.gateway = gateway or create_table_gateway(config)

        if config.create_table_if_missing:
            self.gateway.ensure_table_exists()

    def _to_user_timezone(self, view):
        return convert_model_to_user_timezone(view, self.config.user_timezone)

    def _read_page(
        self,
        query_kwargs: Optional[Dict[str, Any]],
        continuation_token: Optional[str],
        expected: Type[R],
        convert: Callable[[RowMapper, R], V],
        track_last_modified: bool = False
    ) -> Segment[V]:
        """
        One round trip: resume from the token, map the page, re-encode the cursor.

        The token is decoded before any I/O so a bad token fails fast.
        """
        exclusive_start_key = deserialize_token(continuation_token)
        if query_kwargs is None:
            return Segment(results=[])

        if exclusive_start_key:
            query_kwargs = dict(query_kwargs, ExclusiveStartKey=exclusive_start_key)

        response = self.gateway.query(**query_kwargs)
        items = response.get('Items', [])
        next_key = response.get('LastEvaluatedKey')
        logger.debug(
            f"{expected.__name__} page on {self.gateway.table_name}: "
            f"{len(items)} item(s), resumed={exclusive_start_key is not None}, more={next_key is not None}"
        )

        mapper = RowMapper()
        results = mapper.map_page(items, expected, lambda row: convert(mapper, row))

        last_modified = None
        if track_last_modified:
            last_modified = to_user_timezone(mapper.latest_timestamp, self.config.user_timezone)

        return Segment(
            results=[self._to_user_timezone(view) for view in results],
            continuation_token=serialize_token(next_key),
            last_modified=last_modified
        )

    def get_volume(self, start: datetime, end: datetime, number_of_buckets: int) -> List[VolumeSample]:
        """
        Instance volume histogram over [start, end).

        DynamoDB Operation: Query on the instance_counts partition, RowKey
        range, following every page.

        Args:
            start: Inclusive window start
            end: Exclusive window end (must be after start)
            number_of_buckets: Number of samples to return (> 0)

        Returns:
            Exactly number_of_buckets samples in time order

        Raises:
            InvalidArgumentError: start >= end, or number_of_buckets is not an int >= 1
        """
        if not isinstance(number_of_buckets, int) or isinstance(number_of_buckets, bool):
            raise InvalidArgumentError("number_of_buckets", f"number_of_buckets must be an int, got {number_of_buckets!r}")
        if number_of_buckets < 1:
            raise InvalidArgumentError("number_of_buckets", "number_of_buckets must be at least 1")
        start, end = require_time_range(start, end, allow_empty=False)
        query_kwargs = volume_scan(start, end)

        rows = []
        if query_kwargs is not None:
            rows = (decode_as(item, InstanceCountRow) for item in self.gateway.query_all(**query_kwargs))

        samples = reduce_volume(rows, start, end, number_of_buckets)
        return [self._to_user_timezone(sample) for sample in samples]

    def get_function_definitions(self, continuation_token: Optional[str] = None) -> Segment[FunctionDefinitionView]:
        """
        Functions known to the host.

        DynamoDB Operation: Query on the function_definitions partition

        Returns:
            Segment[FunctionDefinitionView]; last_modified is the latest
            definition write time on this page
        """
        return self._read_page(
            function_definitions_scan(),
            continuation_token,
            FunctionDefinitionRow,
            RowMapper.to_function_definition,
            track_last_modified=True
        )

    def lookup_function_instance(self, instance_id: Union[str, uuid.UUID]) -> Optional[FunctionInstanceLogItem]:
        """
        Full record of one execution.

        DynamoDB Operation: GetItem on the instance's detail row

        Returns:
            FunctionInstanceLogItem if found, None otherwise

        Raises:
            InvalidArgumentError: instance_id is not a UUID
        """
        key = instance_lookup_key(instance_id)
        item = self.gateway.get_item(key)
        if item is None:
            logger.debug(f"No execution record for {key}")
            return None

        view = RowMapper().to_instance_log_item(decode_as(item, InstanceDetailRow))
        return self._to_user_timezone(view)

    def get_active_container_timeline(
        self,
        start: datetime,
        end: datetime,
        continuation_token: Optional[str] = None
    ) -> Segment[ActivationEvent]:
        """
        Container activations that started in a time bucket overlapping [start, end).

        DynamoDB Operation: Query on the container_activations partition, RowKey range

        Returns:
            Segment[ActivationEvent] with container names interned per page
        """
        return self._read_page(
            activation_timeline_scan(start, end),
            continuation_token,
            ContainerActivationRow,
            RowMapper.to_activation_event
        )

    def get_aggregate_stats(
        self,
        function_name: str,
        start: datetime,
        end: datetime,
        continuation_token: Optional[str] = None
    ) -> Segment[AggregateEntry]:
        """
        Per-bucket execution totals of one function over [start, end).

        DynamoDB Operation: Query on aggregates#<function>, RowKey range

        Returns:
            Segment[AggregateEntry] in time order

        Raises:
            InvalidArgumentError: empty function_name or start after end
        """
        return self._read_page(
            aggregate_stats_scan(function_name, start, end),
            continuation_token,
            AggregateStatRow,
            RowMapper.to_aggregate_entry
        )

    def get_recent_function_instances(
        self,
        query: RecentFunctionQuery,
        continuation_token: Optional[str] = None
    ) -> Segment[RecentInstanceEntry]:
        """
        Executions of a function started in [query.start, query.end), newest first.

        DynamoDB Operation: Query on recent#<function>, RowKey range,
        ScanIndexForward=False, Limit=max_results, optional status filter

        Returns:
            Segment[RecentInstanceEntry]; with a status filter a page may be
            short or empty while still carrying a token

        Raises:
            InvalidArgumentError: empty function name, start after end, or max_results < 1
        """
        return self._read_page(
            recent_instances_scan(query),
            continuation_token,
            RecentInstanceRow,
            RowMapper.to_recent_entry
        )
