"""
Stored Row Models for the Function Log Table

Every kind of telemetry lives in one DynamoDB table keyed by
(PartitionKey, RowKey). The shape of PartitionKey tells the row kinds apart:

    instance_counts                 InstanceCountRow
    function_definitions            FunctionDefinitionRow
    container_activations           ContainerActivationRow
    aggregates#<function name>      AggregateStatRow
    recent#<function name>          RecentInstanceRow
    instance#<instance id>          InstanceDetailRow

Numeric key components are zero padded so that lexical RowKey order is
numeric order, which is what makes range scans over time work.
"""

from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import DateTimeMixin, DynamoDBMixin, StoredBool, StoredInt


# =============================================================================
# Enums
# =============================================================================

class FunctionInstanceStatus(str, Enum):
    """Lifecycle status of a single function execution."""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    UNKNOWN = "unknown"


# =============================================================================
# Table Scheme
# =============================================================================

class TableScheme:
    """Key layout of the shared function log table."""
    partition_key: str = "PartitionKey"
    sort_key: str = "RowKey"

    INSTANCE_COUNTS_PK = "instance_counts"
    FUNCTION_DEFINITIONS_PK = "function_definitions"
    CONTAINER_ACTIVATIONS_PK = "container_activations"
    AGGREGATES_PREFIX = "aggregates"
    RECENT_PREFIX = "recent"
    INSTANCE_PREFIX = "instance"
    INSTANCE_ROW_KEY = "instance"

    SEPARATOR = "#"
    TICKS_WIDTH = 20
    BUCKET_WIDTH = 10
    # Sorts after every character used in key suffixes, closing a padded prefix range.
    RANGE_END_SUFFIX = "~"

    @classmethod
    def get_key_fields(cls) -> List[str]:
        return [cls.partition_key, cls.sort_key]

    @classmethod
    def key_schema(cls) -> List[Dict[str, str]]:
        return [
            {'AttributeName': cls.partition_key, 'KeyType': 'HASH'},
            {'AttributeName': cls.sort_key, 'KeyType': 'RANGE'},
        ]

    @classmethod
    def attribute_definitions(cls) -> List[Dict[str, str]]:
        return [
            {'AttributeName': cls.partition_key, 'AttributeType': 'S'},
            {'AttributeName': cls.sort_key, 'AttributeType': 'S'},
        ]

    @staticmethod
    def normalize_function_name(function_name: str) -> str:
        return function_name.strip().lower()

    @classmethod
    def ticks_key(cls, ticks: int) -> str:
        return f"{ticks:0{cls.TICKS_WIDTH}d}"

    @classmethod
    def bucket_key(cls, bucket_id: int) -> str:
        return f"{bucket_id:0{cls.BUCKET_WIDTH}d}"

    @classmethod
    def aggregates_partition(cls, function_name: str) -> str:
        return f"{cls.AGGREGATES_PREFIX}{cls.SEPARATOR}{cls.normalize_function_name(function_name)}"

    @classmethod
    def recent_partition(cls, function_name: str) -> str:
        return f"{cls.RECENT_PREFIX}{cls.SEPARATOR}{cls.normalize_function_name(function_name)}"

    @classmethod
    def instance_partition(cls, instance_id: str) -> str:
        return f"{cls.INSTANCE_PREFIX}{cls.SEPARATOR}{instance_id}"


# =============================================================================
# Row Models
# =============================================================================

class LogRow(DynamoDBMixin, DateTimeMixin, BaseModel):
    """
    Common shape of every stored row.

    Subclasses declare `row_kind`, the PartitionKey head they are stored
    under, and whether that head is followed by `#<suffix>`.
    """

    row_kind: ClassVar[str]
    suffixed_partition: ClassVar[bool] = False

    partition_key: str = Field(..., alias="PartitionKey")
    row_key: str = Field(..., alias="RowKey")
    timestamp: Optional[datetime] = Field(None, description="Last write time of the row")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class InstanceCountRow(LogRow):
    """Per-container count of running instances sampled at one tick."""

    row_kind: ClassVar[str] = TableScheme.INSTANCE_COUNTS_PK

    ticks: StoredInt = Field(..., description="Sample time in microseconds since the epoch")
    count: StoredInt = Field(..., description="Number of running instances")
    size: StoredInt = Field(..., description="Weight of each instance (e.g. machine size)")
    container_name: Optional[str] = Field(None, description="Container that reported the sample")

    def get_ticks(self) -> int:
        return self.ticks


class FunctionDefinitionRow(LogRow):
    """A function known to the host, one row per function."""

    row_kind: ClassVar[str] = TableScheme.FUNCTION_DEFINITIONS_PK

    function_id: str = Field(..., description="Host-assigned function identifier")
    function_name: str = Field(..., description="Display name of the function")


class ContainerActivationRow(LogRow):
    """A span of time buckets during which a container was active."""

    row_kind: ClassVar[str] = TableScheme.CONTAINER_ACTIVATIONS_PK

    container_name: str = Field(..., description="Name of the activated container")
    start_bucket: StoredInt = Field(..., description="Time bucket the activation started in")
    length: StoredInt = Field(..., description="Activation length in buckets")


class AggregateStatRow(LogRow):
    """Per-function execution totals for one time bucket."""

    row_kind: ClassVar[str] = TableScheme.AGGREGATES_PREFIX
    suffixed_partition: ClassVar[bool] = True

    function_name: str = Field(..., description="Function the totals belong to")
    time_bucket: StoredInt = Field(..., description="Time bucket of the totals")
    total_pass: StoredInt = Field(0, description="Executions that succeeded")
    total_fail: StoredInt = Field(0, description="Executions that failed")
    total_run: StoredInt = Field(0, description="Executions started")


class RecentInstanceRow(LogRow):
    """Index row listing one execution of a function by start time."""

    row_kind: ClassVar[str] = TableScheme.RECENT_PREFIX
    suffixed_partition: ClassVar[bool] = True

    function_instance_id: str = Field(..., description="Execution identifier")
    function_name: str = Field(..., description="Function that executed")
    display_name: Optional[str] = Field(None, description="Display name of the execution")
    start_time: datetime = Field(..., description="Execution start time")
    end_time: Optional[datetime] = Field(None, description="Execution end time")
    status: FunctionInstanceStatus = Field(FunctionInstanceStatus.UNKNOWN, description="Execution status")
    has_error: StoredBool = Field(False, description="Whether the execution reported an error")


class InstanceDetailRow(LogRow):
    """Full record of one execution, addressed by its id."""

    row_kind: ClassVar[str] = TableScheme.INSTANCE_PREFIX
    suffixed_partition: ClassVar[bool] = True

    function_instance_id: str = Field(..., description="Execution identifier")
    function_name: str = Field(..., description="Function that executed")
    function_id: Optional[str] = Field(None, description="Host-assigned function identifier")
    parent_id: Optional[str] = Field(None, description="Execution that caused this one")
    trigger_reason: Optional[str] = Field(None, description="Why the execution was triggered")
    arguments: Dict[str, str] = Field(default_factory=dict, description="Bound argument values")
    start_time: datetime = Field(..., description="Execution start time")
    end_time: Optional[datetime] = Field(None, description="Execution end time")
    error_details: Optional[str] = Field(None, description="Error summary if the execution failed")
    log_output: Optional[str] = Field(None, description="Captured log output")
    container_name: Optional[str] = Field(None, description="Container that ran the execution")


ROW_TYPES: Dict[str, type] = {
    row_type.row_kind: row_type
    for row_type in (
        InstanceCountRow,
        FunctionDefinitionRow,
        ContainerActivationRow,
        AggregateStatRow,
        RecentInstanceRow,
        InstanceDetailRow,
    )
}
