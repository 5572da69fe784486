"""
Row decoding and mapping.

decode_row() turns a raw DynamoDB item into the LogRow variant its
PartitionKey names, refusing shapes it does not recognize. RowMapper then
turns rows into read views.

A RowMapper lives for one call. It interns repeated strings (container and
function names) so equal values on one page share a single object, and it
remembers the latest row timestamp it has seen. Both are dropped with the
mapper.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

from ...core.time_bucket import time_for
from ...exceptions import SchemaMismatchError
from ...models import (
    ROW_TYPES,
    ActivationEvent,
    AggregateEntry,
    AggregateStatRow,
    ContainerActivationRow,
    FunctionDefinitionRow,
    FunctionDefinitionView,
    FunctionInstanceLogItem,
    FunctionInstanceStatus,
    InstanceDetailRow,
    LogRow,
    RecentInstanceEntry,
    RecentInstanceRow,
    TableScheme,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=LogRow)
V = TypeVar("V")


def decode_row(item: Dict[str, Any]) -> LogRow:
    """
    Decode a raw item into its LogRow variant.

    Raises:
        SchemaMismatchError: Unknown partition shape or payload that does not fit the variant
    """
    partition = item.get(TableScheme.partition_key)
    row_key = item.get(TableScheme.sort_key)
    if not isinstance(partition, str) or not partition:
        raise SchemaMismatchError("Row has no PartitionKey", row_key=row_key)

    head, separator, suffix = partition.partition(TableScheme.SEPARATOR)
    row_type = ROW_TYPES.get(head)
    if row_type is None or row_type.suffixed_partition != bool(separator and suffix):
        raise SchemaMismatchError(
            f"Unrecognized row shape for partition '{partition}'",
            partition_key=partition,
            row_key=row_key
        )
    return row_type.from_dynamodb_item(item)


def decode_as(item: Dict[str, Any], expected: Type[R]) -> R:
    """Decode a raw item, requiring it to be a particular variant."""
    row = decode_row(item)
    if not isinstance(row, expected):
        raise SchemaMismatchError(
            f"Expected {expected.__name__}, found {type(row).__name__}",
            partition_key=row.partition_key,
            row_key=row.row_key
        )
    return row


def derive_status(row: InstanceDetailRow) -> FunctionInstanceStatus:
    if row.end_time is None:
        return FunctionInstanceStatus.RUNNING
    if row.error_details:
        return FunctionInstanceStatus.FAILED
    return FunctionInstanceStatus.SUCCESS


class RowMapper:
    """Per-call converter from stored rows to views."""

    def __init__(self):
        self._interned: Dict[str, str] = {}
        self.latest_timestamp: Optional[datetime] = None

    def intern(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return self._interned.setdefault(value, value)

    def observe(self, row: LogRow) -> None:
        if row.timestamp is not None and (self.latest_timestamp is None or row.timestamp > self.latest_timestamp):
            self.latest_timestamp = row.timestamp

    def map_page(self, items: Iterable[Dict[str, Any]], expected: Type[R], convert: Callable[[R], V]) -> List[V]:
        """
        Decode and convert every item of a page.

        All or nothing: the first row that fails to decode aborts the page
        and no partial list is returned.
        """
        results = []
        for item in items:
            row = decode_as(item, expected)
            self.observe(row)
            results.append(convert(row))
        return results

    def to_activation_event(self, row: ContainerActivationRow) -> ActivationEvent:
        return ActivationEvent(
            container_name=self.intern(row.container_name),
            start_time_bucket=row.start_bucket,
            start_time=time_for(row.start_bucket),
            length=row.length
        )

    def to_function_definition(self, row: FunctionDefinitionRow) -> FunctionDefinitionView:
        return FunctionDefinitionView(
            function_id=row.function_id,
            function_name=row.function_name,
            last_modified=row.timestamp
        )

    def to_aggregate_entry(self, row: AggregateStatRow) -> AggregateEntry:
        return AggregateEntry(
            function_name=self.intern(row.function_name),
            time_bucket=row.time_bucket,
            time=time_for(row.time_bucket),
            total_pass=row.total_pass,
            total_fail=row.total_fail,
            total_run=row.total_run
        )

    def to_recent_entry(self, row: RecentInstanceRow) -> RecentInstanceEntry:
        return RecentInstanceEntry(
            function_instance_id=row.function_instance_id,
            function_name=self.intern(row.function_name),
            display_name=row.display_name,
            start_time=row.start_time,
            end_time=row.end_time,
            status=row.status,
            has_error=row.has_error
        )

    def to_instance_log_item(self, row: Optional[InstanceDetailRow]) -> Optional[FunctionInstanceLogItem]:
        """Full execution record; None when the lookup matched no row."""
        if row is None:
            return None
        return FunctionInstanceLogItem(
            function_instance_id=row.function_instance_id,
            function_name=row.function_name,
            function_id=row.function_id,
            parent_id=row.parent_id,
            trigger_reason=row.trigger_reason,
            arguments=dict(row.arguments),
            start_time=row.start_time,
            end_time=row.end_time,
            error_details=row.error_details,
            log_output=row.log_output,
            container_name=row.container_name,
            status=derive_status(row)
        )
