"""
Scan descriptors for each log query.

Every builder is a pure function: it validates its arguments and returns the
keyword arguments for one boto3 `Table.query` (or, for lookups, a primary
key). Nothing here performs I/O.

Time ranges are half-open, [start, end). Row keys hold zero-padded integers,
so a range becomes a `between` over padded strings whose upper bound is the
last included value followed by RANGE_END_SUFFIX. A builder returns None
when the range holds no representable key, meaning there is nothing to scan.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from boto3.dynamodb.conditions import Attr

from ...core.time_bucket import TICKS_PER_BUCKET, bucket_id_for, to_ticks
from ...exceptions import InvalidArgumentError
from ...models import RecentFunctionQuery, TableScheme
from ...utils import build_key_condition, to_utc


def require_function_name(function_name: Optional[str]) -> str:
    if function_name is None or not function_name.strip():
        raise InvalidArgumentError("function_name", "function_name must be a non-empty string")
    return function_name


def require_time_range(start: datetime, end: datetime, allow_empty: bool = True) -> Tuple[datetime, datetime]:
    """Validate and normalize a [start, end) range to UTC."""
    if start is None or end is None:
        raise InvalidArgumentError("start" if start is None else "end", "start and end are required")
    start, end = to_utc(start), to_utc(end)
    if start > end:
        raise InvalidArgumentError("start", f"start ({start.isoformat()}) is after end ({end.isoformat()})")
    if not allow_empty and start == end:
        raise InvalidArgumentError("end", "end must be after start")
    return start, end


def _tick_bounds(start: datetime, end: datetime) -> Optional[Tuple[str, str]]:
    first = max(to_ticks(start), 0)
    last = to_ticks(end) - 1
    if last < first:
        return None
    return TableScheme.ticks_key(first), TableScheme.ticks_key(last) + TableScheme.RANGE_END_SUFFIX


def _bucket_bounds(start: datetime, end: datetime, suffixed: bool) -> Optional[Tuple[str, str]]:
    """Buckets overlapping [start, end): from start's bucket to the bucket of the last tick."""
    if start == end:
        return None
    first = max(bucket_id_for(start), 0)
    last = (to_ticks(end) - 1) // TICKS_PER_BUCKET
    if last < first:
        return None
    upper = TableScheme.bucket_key(last)
    if suffixed:
        upper += TableScheme.RANGE_END_SUFFIX
    return TableScheme.bucket_key(first), upper


def _range_query(partition: str, bounds: Tuple[str, str]) -> Dict[str, Any]:
    low, high = bounds
    return {
        'KeyConditionExpression': build_key_condition(
            TableScheme.partition_key, partition,
            TableScheme.sort_key, 'between', low, high
        )
    }


def volume_scan(start: datetime, end: datetime) -> Optional[Dict[str, Any]]:
    """Instance count samples with ticks in [start, end)."""
    start, end = require_time_range(start, end)
    bounds = _tick_bounds(start, end)
    if bounds is None:
        return None
    return _range_query(TableScheme.INSTANCE_COUNTS_PK, bounds)


def function_definitions_scan() -> Dict[str, Any]:
    """Every row of the function definitions partition."""
    return {
        'KeyConditionExpression': build_key_condition(
            TableScheme.partition_key, TableScheme.FUNCTION_DEFINITIONS_PK
        )
    }


def activation_timeline_scan(start: datetime, end: datetime) -> Optional[Dict[str, Any]]:
    """Container activations starting in a bucket that overlaps [start, end)."""
    start, end = require_time_range(start, end)
    bounds = _bucket_bounds(start, end, suffixed=True)
    if bounds is None:
        return None
    return _range_query(TableScheme.CONTAINER_ACTIVATIONS_PK, bounds)


def aggregate_stats_scan(function_name: Optional[str], start: datetime, end: datetime) -> Optional[Dict[str, Any]]:
    """
    Per-bucket totals of one function over [start, end).

    Raises:
        InvalidArgumentError: function_name is None/empty, or start is after end
    """
    function_name = require_function_name(function_name)
    start, end = require_time_range(start, end)
    bounds = _bucket_bounds(start, end, suffixed=False)
    if bounds is None:
        return None
    return _range_query(TableScheme.aggregates_partition(function_name), bounds)


def recent_instances_scan(query: RecentFunctionQuery) -> Optional[Dict[str, Any]]:
    """
    Executions of one function started in [start, end), newest first.

    `max_results` bounds the rows DynamoDB evaluates per round trip; with a
    status filter a page may hold fewer rows than that, or none.

    Raises:
        InvalidArgumentError: missing function name, start after end, or max_results < 1
    """
    function_name = require_function_name(query.function_name)
    start, end = require_time_range(query.start, query.end)
    if query.max_results < 1:
        raise InvalidArgumentError("max_results", "max_results must be at least 1")

    bounds = _tick_bounds(start, end)
    if bounds is None:
        return None

    query_kwargs = _range_query(TableScheme.recent_partition(function_name), bounds)
    query_kwargs['ScanIndexForward'] = False  # Most recent first
    query_kwargs['Limit'] = query.max_results
    if query.status is not None:
        query_kwargs['FilterExpression'] = Attr('status').eq(query.status.value)
    return query_kwargs


def canonical_instance_id(instance_id: Union[str, uuid.UUID]) -> str:
    """Lowercase hyphenated form of an instance id."""
    if isinstance(instance_id, uuid.UUID):
        return str(instance_id)
    if not isinstance(instance_id, str) or not instance_id.strip():
        raise InvalidArgumentError("instance_id", "instance_id must be a UUID")
    try:
        return str(uuid.UUID(instance_id.strip()))
    except ValueError as e:
        raise InvalidArgumentError("instance_id", f"instance_id is not a UUID: {instance_id!r}", e) from e


def instance_lookup_key(instance_id: Union[str, uuid.UUID]) -> Dict[str, str]:
    """Primary key of the detail row for one execution."""
    return {
        TableScheme.partition_key: TableScheme.instance_partition(canonical_instance_id(instance_id)),
        TableScheme.sort_key: TableScheme.INSTANCE_ROW_KEY,
    }
