"""
Base Model Components and Mixins

Common functionality shared by stored row models and read views.

## Components

- DateTimeMixin: every datetime field leaves validation as an aware UTC value
- DynamoDBMixin: canonical entry point for building a model from a DynamoDB item
- StoredInt / StoredBool: strict column types for stored rows
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, BeforeValidator, Strict, ValidationError, field_validator

from ..utils import to_utc

logger = logging.getLogger(__name__)


def _integral_decimal_to_int(value):
    """DynamoDB Numbers arrive as Decimal; only whole values become int."""
    if isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        return int(value)
    return value


# Stored columns are validated strictly; a whole Decimal is the only conversion.
StoredInt = Annotated[int, Strict(), BeforeValidator(_integral_decimal_to_int)]
StoredBool = Annotated[bool, Strict()]


class DateTimeMixin(BaseModel):
    """
    Mixin providing consistent datetime normalization.

    Pydantic parses ISO strings (including the 'Z' suffix) itself; this mixin
    runs afterwards and pins every datetime to UTC. Naive values are taken as
    UTC, which is how the log table stores them.
    """

    @field_validator('*', mode='after')
    @classmethod
    def normalize_datetime_fields(cls, v):
        if isinstance(v, datetime):
            return to_utc(v)
        return v


class DynamoDBMixin(BaseModel):
    """
    Mixin providing DynamoDB deserialization.

    boto3's resource layer already turns DynamoDB Numbers into Decimal and
    BOOL into bool. Row models declare those columns as StoredInt and
    StoredBool, so a string, bool or fractional value where a count belongs
    fails validation instead of being coerced. Attributes the model does not
    declare are ignored, which lets writers add columns ahead of readers.
    """

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]):
        """
        Create model instance from DynamoDB item.

        Args:
            item: DynamoDB item dictionary as returned by boto3

        Returns:
            Model instance

        Raises:
            SchemaMismatchError: If the item does not fit the model's shape
        """
        try:
            return cls.model_validate(item)
        except ValidationError as e:
            logger.error(f"Failed to convert DynamoDB item to {cls.__name__}: {e}")
            from ..exceptions import SchemaMismatchError
            raise SchemaMismatchError(
                f"Stored row does not match {cls.__name__}: {e}",
                partition_key=item.get('PartitionKey'),
                row_key=item.get('RowKey'),
                original_error=e
            ) from e
