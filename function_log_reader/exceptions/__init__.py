# Base exception class
from .base import LogReaderError

# Domain-specific exceptions
from .domain_exceptions import (
    ValidationError,
    InvalidArgumentError,
    InvalidTokenError,
    SchemaMismatchError,
    NotFoundError,
    ConnectionError,
    TransientScanError,
)

__all__ = [
    # Base exception
    "LogReaderError",

    # Domain exceptions (alphabetically ordered)
    "ConnectionError",
    "InvalidArgumentError",
    "InvalidTokenError",
    "NotFoundError",
    "SchemaMismatchError",
    "TransientScanError",
    "ValidationError",
]
