"""
Core infrastructure components for reading the function log table.

- TableGateway: thin wrapper over boto3 DynamoDB read operations
- Time bucket and tick arithmetic
- Continuation token codec
"""

from .table_gateway import TableGateway, create_table_gateway
from .time_bucket import (
    TIME_BUCKET_WIDTH,
    TICKS_PER_BUCKET,
    bucket_id_for,
    time_for,
    to_ticks,
    from_ticks,
)
from .pagination import (
    TOKEN_VERSION,
    serialize_token,
    deserialize_token,
    iterate_segments,
)

__all__ = [
    "TableGateway",
    "create_table_gateway",
    "TIME_BUCKET_WIDTH",
    "TICKS_PER_BUCKET",
    "bucket_id_for",
    "time_for",
    "to_ticks",
    "from_ticks",
    "TOKEN_VERSION",
    "serialize_token",
    "deserialize_token",
    "iterate_segments",
]
