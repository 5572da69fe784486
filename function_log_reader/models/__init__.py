# Base mixins
from .base import (
    DateTimeMixin,
    DynamoDBMixin,
    StoredBool,
    StoredInt,
)

# Stored rows and table layout
from .domain_models import (
    TableScheme,
    FunctionInstanceStatus,
    LogRow,
    InstanceCountRow,
    FunctionDefinitionRow,
    ContainerActivationRow,
    AggregateStatRow,
    RecentInstanceRow,
    InstanceDetailRow,
    ROW_TYPES,
)

# Read views
from .views import (
    VolumeSample,
    ActivationEvent,
    FunctionDefinitionView,
    AggregateEntry,
    RecentInstanceEntry,
    FunctionInstanceLogItem,
    Segment,
)

# Query parameters
from .dtos import (
    DEFAULT_MAX_RESULTS,
    RecentFunctionQuery,
)

__all__ = [
    # Base mixins
    "DateTimeMixin",
    "DynamoDBMixin",
    "StoredBool",
    "StoredInt",

    # Stored rows
    "TableScheme",
    "FunctionInstanceStatus",
    "LogRow",
    "InstanceCountRow",
    "FunctionDefinitionRow",
    "ContainerActivationRow",
    "AggregateStatRow",
    "RecentInstanceRow",
    "InstanceDetailRow",
    "ROW_TYPES",

    # Read views
    "VolumeSample",
    "ActivationEvent",
    "FunctionDefinitionView",
    "AggregateEntry",
    "RecentInstanceEntry",
    "FunctionInstanceLogItem",
    "Segment",

    # Query parameters
    "DEFAULT_MAX_RESULTS",
    "RecentFunctionQuery",
]
