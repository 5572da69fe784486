"""
Test configuration and fixtures for the function log reader.

Provides a moto-backed log table plus reader fixtures, and LocalStack
fixtures for the opt-in integration tests.
"""

import sys
from pathlib import Path
from typing import Generator

# Add parent directory to path so we can import function_log_reader
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
import requests
from moto import mock_aws

from function_log_reader import LogReader, LogReaderConfig
from function_log_reader.models import TableScheme

LOCALSTACK_URL = "http://localhost:4566"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake AWS credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def mock_config():
    """Log reader configuration for mocked testing."""
    return LogReaderConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        environment="test",
        table_prefix="unit",
        create_table_if_missing=False,
        user_timezone=None
    )


@pytest.fixture
def mock_dynamodb_resource(aws_credentials):
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def log_table(mock_dynamodb_resource, mock_config):
    """Create the function log table for testing."""
    return mock_dynamodb_resource.create_table(
        TableName=mock_config.get_table_name(),
        KeySchema=TableScheme.key_schema(),
        AttributeDefinitions=TableScheme.attribute_definitions(),
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def log_reader(mock_config, log_table):
    """Log reader over the mocked table."""
    return LogReader(mock_config)


@pytest.fixture
def put_items(log_table):
    """Write raw items straight into the mocked table."""
    def _put(*items):
        with log_table.batch_writer() as batch:
            for item in items:
                batch.put_item(Item=item)
    return _put


# ===== LocalStack Integration Test Fixtures =====

def _localstack_dynamodb_available() -> bool:
    try:
        response = requests.get(f"{LOCALSTACK_URL}/_localstack/health", timeout=2)
    except requests.RequestException:
        return False
    if response.status_code != 200:
        return False
    return response.json().get("services", {}).get("dynamodb") in ("available", "running")


@pytest.fixture(scope="session")
def localstack_available() -> Generator[None, None, None]:
    """Skip unless a LocalStack endpoint with DynamoDB is already running."""
    if not _localstack_dynamodb_available():
        pytest.skip(f"LocalStack DynamoDB is not reachable at {LOCALSTACK_URL}")
    yield


@pytest.fixture
def localstack_config(localstack_available):
    """Log reader configuration for LocalStack integration testing."""
    return LogReaderConfig(
        aws_access_key_id="test",
        aws_secret_access_key="test",
        region_name="us-east-1",
        endpoint_url=LOCALSTACK_URL,
        environment="dev",
        table_prefix="integration",
        create_table_if_missing=True
    )


@pytest.fixture
def localstack_dynamodb_resource(localstack_available):
    """LocalStack DynamoDB resource for integration testing."""
    return boto3.resource(
        'dynamodb',
        region_name='us-east-1',
        endpoint_url=LOCALSTACK_URL,
        aws_access_key_id='test',
        aws_secret_access_key='test'
    )
