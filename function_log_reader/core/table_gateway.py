"""
Thin DynamoDB Table Gateway

This module is the only place that talks to boto3. It exposes the four
operations the log reader consumes from the storage engine:

- query(): one Query round trip (one page, possibly partial)
- query_all(): every page of a Query, following LastEvaluatedKey
- get_item(): point lookup returning the item or None
- ensure_table_exists(): idempotent create-if-missing

Everything else (key layout, mapping, pagination tokens) is the handler
layer's business. botocore errors are mapped to domain exceptions here so
callers never catch ClientError.
"""

import logging
from typing import Any, Dict, Iterator, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from ..config import LogReaderConfig
from ..exceptions import (
    ConnectionError,
    InvalidTokenError,
    NotFoundError,
    TransientScanError,
    ValidationError,
)
from ..models import TableScheme

logger = logging.getLogger(__name__)

THROTTLING_CODES = frozenset([
    'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
    'ThrottlingException', 'SlowDown', 'BandwidthLimitExceeded',
    'RequestThrottledException', 'TooManyRequestsException',
])

UNAVAILABLE_CODES = frozenset([
    'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
    'ServiceException', 'InternalFailure', 'ServiceFailureException', 'ServiceTimeout',
    'RequestTimeoutException', 'RequestExpiredException',
])

AUTH_CODES = frozenset([
    'UnrecognizedClientException', 'AccessDeniedException',
    'InvalidEndpointException', 'IncompleteSignatureException', 'InvalidSignatureException',
    'ExpiredTokenException', 'TokenRefreshRequiredException',
])


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resuming: bool = False
) -> Exception:
    """Map DynamoDB ClientError to domain-specific exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "Query", "GetItem")
        table_name: The DynamoDB table name
        resuming: Whether the request carried an ExclusiveStartKey from a token

    Returns:
        Appropriate domain exception
    """
    error_code = error.response['Error']['Code']
    error_message = error.response['Error'].get('Message', '')

    full_message = f"{operation} on {table_name}: {error_message}"

    if error_code in THROTTLING_CODES:
        return TransientScanError(f"Throttling - {full_message}", original_error=error)

    elif error_code in UNAVAILABLE_CODES:
        return TransientScanError(f"Service unavailable - {full_message}", original_error=error)

    elif error_code in ('ResourceNotFoundException', 'TableNotFoundException'):
        return NotFoundError(f"Table not found - {full_message}", 'table', table_name, original_error=error)

    elif error_code == 'IndexNotFoundException':
        return NotFoundError(f"Index not found - {full_message}", 'index', table_name, original_error=error)

    elif error_code == 'ValidationException':
        # A well-formed token whose key the table rejects came from another table or layout.
        if resuming:
            return InvalidTokenError(f"rejected by {table_name}: {error_message}", error)
        return ValidationError(f"Validation failed - {full_message}", original_error=error)

    elif error_code in AUTH_CODES:
        return ConnectionError(f"Authentication/authorization failed - {full_message}", original_error=error)

    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to ConnectionError")
    return ConnectionError(f"DynamoDB operation failed - {full_message}", original_error=error)


def map_botocore_error(error: BotoCoreError, operation: str, table_name: str) -> Exception:
    """Map transport-level botocore failures (no HTTP response) to domain exceptions."""
    full_message = f"{operation} on {table_name}: {error}"
    if isinstance(error, (ReadTimeoutError, ConnectTimeoutError)):
        return TransientScanError(f"Request timeout - {full_message}", original_error=error)
    if isinstance(error, EndpointConnectionError):
        return ConnectionError(f"Could not reach endpoint - {full_message}", original_error=error)
    return ConnectionError(f"DynamoDB transport failure - {full_message}", original_error=error)


class TableGateway:
    """
    Thin gateway for the function log table.

    Read-only apart from ensure_table_exists(). The boto3 resource and table
    handle are created lazily on first use and reused afterwards.
    """

    def __init__(self, config: LogReaderConfig, table_name: str):
        """Initialize table gateway.

        Args:
            config: Log reader configuration
            table_name: Full name of the DynamoDB table
        """
        self.config = config
        self.table_name = table_name
        self._dynamodb = None
        self._table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                dynamodb_config = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    dynamodb_config['endpoint_url'] = self.config.endpoint_url

                boto_config = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )
                dynamodb_config['config'] = boto_config

                self._dynamodb = session.resource('dynamodb', **dynamodb_config)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB resource: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._dynamodb

    @property
    def table(self):
        """boto3 DynamoDB Table resource for the log table."""
        if self._table is None:
            try:
                self._table = self.dynamodb.Table(self.table_name)
            except Exception as e:
                logger.error(f"Failed to access table '{self.table_name}': {e}")
                raise ConnectionError(f"Failed to access table '{self.table_name}': {e}", e) from e
        return self._table

    def query(self, **kwargs) -> Dict[str, Any]:
        """
        Execute a single DynamoDB Query round trip.

        The response may hold fewer items than requested (Limit counts items
        evaluated before FilterExpression, and pages stop at 1 MB). Its
        LastEvaluatedKey, when present, is where the next call resumes.

        Args:
            **kwargs: boto3 query parameters

        Returns:
            Raw DynamoDB response
        """
        return self._query(kwargs, resuming='ExclusiveStartKey' in kwargs)

    def _query(self, kwargs: Dict[str, Any], resuming: bool) -> Dict[str, Any]:
        try:
            return self.table.query(**kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, "Query", self.table_name, resuming) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "Query", self.table_name) from e

    def query_all(self, **kwargs) -> Iterator[Dict[str, Any]]:
        """
        Yield every item matching a Query, following LastEvaluatedKey.

        Args:
            **kwargs: boto3 query parameters (ExclusiveStartKey is managed here)

        Yields:
            Raw DynamoDB items in key order
        """
        query_kwargs = dict(kwargs)
        pages = 0
        while True:
            response = self._query(query_kwargs, resuming=False)
            pages += 1
            yield from response.get('Items', [])

            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                logger.debug(f"Range scan on {self.table_name} finished after {pages} round trip(s)")
                return
            query_kwargs['ExclusiveStartKey'] = last_key

    def get_item(self, key: Dict[str, Any], consistent_read: bool = False) -> Optional[Dict[str, Any]]:
        """
        Point lookup by primary key.

        Args:
            key: Full primary key
            consistent_read: Request a strongly consistent read

        Returns:
            The item, or None if no item has this key
        """
        try:
            response = self.table.get_item(Key=key, ConsistentRead=consistent_read)
        except ClientError as e:
            raise map_dynamodb_error(e, "GetItem", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "GetItem", self.table_name) from e
        return response.get('Item')

    def ensure_table_exists(self) -> bool:
        """
        Create the log table if it does not exist yet.

        Safe to call repeatedly and from several processes: a concurrent
        creation (ResourceInUseException) counts as success.

        Returns:
            True if this call created the table, False if it already existed
        """
        client = self.dynamodb.meta.client
        try:
            client.describe_table(TableName=self.table_name)
            return False
        except ClientError as e:
            if e.response['Error']['Code'] != 'ResourceNotFoundException':
                raise map_dynamodb_error(e, "DescribeTable", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "DescribeTable", self.table_name) from e

        try:
            client.create_table(
                TableName=self.table_name,
                KeySchema=TableScheme.key_schema(),
                AttributeDefinitions=TableScheme.attribute_definitions(),
                BillingMode='PAY_PER_REQUEST'
            )
            client.get_waiter('table_exists').wait(TableName=self.table_name)
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceInUseException':
                logger.info(f"Table {self.table_name} is being created concurrently")
                return False
            raise map_dynamodb_error(e, "CreateTable", self.table_name) from e
        except BotoCoreError as e:
            raise map_botocore_error(e, "CreateTable", self.table_name) from e

        logger.info(f"Created table {self.table_name}")
        return True


def create_table_gateway(config: LogReaderConfig, table_name: Optional[str] = None) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: Log reader configuration
        table_name: Base table name (defaults to config.table_name); prefixed via config

    Returns:
        Configured TableGateway instance
    """
    full_table_name = config.get_table_name(table_name)
    return TableGateway(config, full_table_name)
