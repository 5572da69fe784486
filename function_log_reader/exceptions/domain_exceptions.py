"""
Domain-Specific Exceptions for the Function Log Reader

All exceptions extend the base LogReaderError. They describe why a read
against the function log table could not be answered.

Organized by category:
1. Caller Input Errors
2. Stored Data Errors
3. Resource Not Found Errors
4. Infrastructure and Retry Errors
"""

from typing import Any, Dict, Optional

from .base import LogReaderError


# =============================================================================
# Caller Input Errors
# =============================================================================

class ValidationError(LogReaderError):
    """Raised when caller-supplied data fails validation.

    Used for:
    - Pydantic model validation failures on query parameters
    - Storage-side ValidationException responses
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


class InvalidArgumentError(ValidationError):
    """Raised before any scan when a required argument is missing or inconsistent.

    Used for:
    - Null/empty function names
    - Time ranges whose start is after their end
    - Non-positive bucket counts or page sizes
    - Instance ids that are not UUIDs
    """

    def __init__(self, argument: str, message: str, original_error: Optional[Exception] = None):
        """Initialize invalid argument error.

        Args:
            argument: Name of the offending argument
            message: Human-readable error message
            original_error: The original exception that caused this error
        """
        self.argument = argument
        super().__init__(message, {argument: message}, original_error)


class InvalidTokenError(ValidationError):
    """Raised when a continuation token cannot be resumed.

    The token is malformed, was tampered with, or was produced by an
    incompatible version. Callers restart from the first page rather than
    retrying the same token.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(f"Invalid continuation token - {message}", None, original_error)


# =============================================================================
# Stored Data Errors
# =============================================================================

class SchemaMismatchError(LogReaderError):
    """Raised when a stored row does not match any known row shape.

    Signals producer/consumer version skew. Never coerced: the page being
    mapped is abandoned.
    """

    def __init__(self, message: str, partition_key: Optional[str] = None, row_key: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize schema mismatch error.

        Args:
            message: Human-readable error message
            partition_key: PartitionKey of the offending row, if known
            row_key: RowKey of the offending row, if known
            original_error: The original exception that caused this error
        """
        self.partition_key = partition_key
        self.row_key = row_key
        context = {}
        if partition_key is not None:
            context['partition_key'] = partition_key
        if row_key is not None:
            context['row_key'] = row_key
        super().__init__(message, original_error, context)


# =============================================================================
# Resource Not Found Errors
# =============================================================================

class NotFoundError(LogReaderError):
    """Raised when a storage resource (table, index) is not found.

    Point lookups of unknown instance ids do not raise this; they return None.
    """

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_name: Optional[str] = None, original_error: Optional[Exception] = None):
        """Initialize not found error.

        Args:
            message: Human-readable error message
            resource_type: Type of resource not found (e.g., 'table', 'index')
            resource_name: Name of the resource not found
            original_error: The original exception that caused this error
        """
        self.resource_type = resource_type
        self.resource_name = resource_name
        context = {}
        if resource_type:
            context['resource_type'] = resource_type
        if resource_name:
            context['resource_name'] = resource_name
        super().__init__(message, original_error, context)


# =============================================================================
# Infrastructure and Retry Errors
# =============================================================================

class ConnectionError(LogReaderError):
    """Raised when the storage backend cannot be reached or rejects the caller.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Invalid endpoint configurations
    - Unrecognized storage error codes
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)


class TransientScanError(LogReaderError):
    """Raised when a scan fails for a temporary reason and may be retried.

    Used for:
    - ProvisionedThroughputExceededException / throttling
    - Service unavailability and internal server errors
    - Request and read timeouts

    This layer never retries on its own; callers retry with backoff.
    """

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None, original_error: Optional[Exception] = None):
        """Initialize transient scan error.

        Args:
            message: Human-readable error message
            retry_after_seconds: Suggested retry delay in seconds
            original_error: The original exception that caused this error
        """
        self.retry_after_seconds = retry_after_seconds
        context = {}
        if retry_after_seconds:
            context['retry_after_seconds'] = retry_after_seconds
        super().__init__(message, original_error, context)
