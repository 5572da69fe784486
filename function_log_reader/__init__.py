# Function Log Reader Package
"""
Function Log Reader

Read-side query library over the DynamoDB function log table, built on
boto3 and Pydantic. Answers dashboard questions about function executions:
instance volume over time, container activations, per-function aggregates,
recent executions and full execution records, with opaque continuation
tokens for paged reads.
"""

from .config import LogReaderConfig
from .exceptions import (
    ConnectionError,
    InvalidArgumentError,
    InvalidTokenError,
    LogReaderError,
    NotFoundError,
    SchemaMismatchError,
    TransientScanError,
    ValidationError,
)
from .models import (
    # Enums
    FunctionInstanceStatus,
    # Read views
    VolumeSample,
    ActivationEvent,
    FunctionDefinitionView,
    AggregateEntry,
    RecentInstanceEntry,
    FunctionInstanceLogItem,
    Segment,
    # Query parameters
    RecentFunctionQuery,
)
from .core import (
    TableGateway,
    create_table_gateway,
    bucket_id_for,
    time_for,
    iterate_segments,
)
from .handlers.log_reader import LogReader

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "LogReaderConfig",

    # Exceptions
    "ConnectionError",
    "InvalidArgumentError",
    "InvalidTokenError",
    "LogReaderError",
    "NotFoundError",
    "SchemaMismatchError",
    "TransientScanError",
    "ValidationError",

    # Enums
    "FunctionInstanceStatus",

    # Read views
    "VolumeSample",
    "ActivationEvent",
    "FunctionDefinitionView",
    "AggregateEntry",
    "RecentInstanceEntry",
    "FunctionInstanceLogItem",
    "Segment",

    # Query parameters
    "RecentFunctionQuery",

    # Infrastructure
    "TableGateway",
    "create_table_gateway",
    "bucket_id_for",
    "time_for",
    "iterate_segments",

    # Read API
    "LogReader",
]
