"""
Function Log Reader Utilities

Shared helpers used by the gateway and handler layers.

Key Features:
- Timezone management (UTC normalization, display conversion)
- Query building (key conditions)

Architecture Compliance:
- Gateway layer: UTC-only operations, no timezone conversion
- Handler layer: Timezone conversion at boundaries
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

from boto3.dynamodb.conditions import Key
from pydantic import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# Timezone Utilities
# =============================================================================

def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC.

    Handles both timezone-aware and naive datetimes. Naive datetimes are assumed
    to already be in UTC.

    Args:
        dt: Datetime to convert to UTC

    Returns:
        Datetime in UTC timezone, or None if input is None

    Examples:
        >>> dt = datetime(2024, 1, 1, 10, 0, tzinfo=ZoneInfo('America/New_York'))
        >>> to_utc(dt)  # -> 2024-01-01 15:00:00+00:00

        >>> dt = datetime(2024, 1, 1, 10, 0)
        >>> to_utc(dt)  # -> 2024-01-01 10:00:00+00:00
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_user_timezone(dt: datetime, user_tz: Optional[str] = None) -> datetime:
    """Convert UTC datetime to user's timezone for display.

    Args:
        dt: UTC datetime to convert
        user_tz: Target timezone for display (if None, returns unchanged)

    Returns:
        Datetime in user's timezone, or original datetime if user_tz is None
    """
    if dt is None or user_tz is None:
        return dt

    return dt.astimezone(ZoneInfo(user_tz))


def convert_model_to_user_timezone(model_instance: BaseModel, user_tz: Optional[str]) -> BaseModel:
    """Return a copy of a view with every top-level datetime moved to user_tz.

    Handler-boundary conversion: the storage and mapping layers stay in UTC.
    """
    if not user_tz:
        return model_instance

    updates = {
        name: to_user_timezone(value, user_tz)
        for name, value in model_instance
        if isinstance(value, datetime)
    }
    if not updates:
        return model_instance
    return model_instance.model_copy(update=updates)


# =============================================================================
# Query Building Utilities
# =============================================================================

def build_key_condition(
    partition_key: str,
    partition_value: Any,
    sort_key: Optional[str] = None,
    sort_condition: str = "eq",
    sort_value: Optional[Any] = None,
    sort_value2: Optional[Any] = None
):
    """Build KeyConditionExpression for DynamoDB queries.

    Args:
        partition_key: Partition key attribute name
        partition_value: Partition key value
        sort_key: Sort key attribute name (optional)
        sort_condition: Sort key condition type ('eq', 'begins_with', 'between', 'gt', 'gte', 'lt', 'lte')
        sort_value: Sort key value
        sort_value2: Second sort key value (required for 'between' condition)

    Returns:
        KeyConditionExpression for boto3

    Examples:
        Whole partition:
        >>> build_key_condition('PartitionKey', 'function_definitions')

        Range within a partition:
        >>> build_key_condition('PartitionKey', 'instance_counts', 'RowKey', 'between', '000...1', '000...9~')

    Raises:
        ValueError: For invalid sort_condition or missing sort_value2 for 'between'
    """
    condition = Key(partition_key).eq(partition_value)

    if sort_key and sort_value is not None:
        sort_key_obj = Key(sort_key)

        if sort_condition == "eq":
            condition = condition & sort_key_obj.eq(sort_value)
        elif sort_condition == "begins_with":
            condition = condition & sort_key_obj.begins_with(sort_value)
        elif sort_condition == "between":
            if sort_value2 is None:
                raise ValueError("'between' condition requires sort_value2 parameter")
            condition = condition & sort_key_obj.between(sort_value, sort_value2)
        elif sort_condition == "gt":
            condition = condition & sort_key_obj.gt(sort_value)
        elif sort_condition == "gte":
            condition = condition & sort_key_obj.gte(sort_value)
        elif sort_condition == "lt":
            condition = condition & sort_key_obj.lt(sort_value)
        elif sort_condition == "lte":
            condition = condition & sort_key_obj.lte(sort_value)
        else:
            raise ValueError(
                f"Unsupported sort_condition: {sort_condition}. "
                f"Supported values: eq, begins_with, between, gt, gte, lt, lte"
            )

    return condition


__all__ = [
    "to_utc",
    "to_user_timezone",
    "convert_model_to_user_timezone",
    "build_key_condition",
]
