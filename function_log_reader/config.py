import logging
import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

PACKAGE_LOGGER = "function_log_reader"


class LogReaderConfig(BaseModel):
    """Configuration for the function log table connection and reads."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DYNAMODB_TABLE_PREFIX", ""),
        description="Prefix to add to all table names"
    )

    table_name: str = Field(
        default_factory=lambda: os.getenv("FUNCTION_LOG_TABLE", "function_logs"),
        description="Base name of the shared function log table"
    )

    create_table_if_missing: bool = Field(
        default_factory=lambda: os.getenv("FUNCTION_LOG_CREATE_TABLE", "true").lower() == "true",
        description="Create the log table on reader construction when it does not exist"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="Number of transport-level retry attempts for failed requests"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Environment settings
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "dev"),
        description="Current environment (dev, test, staging, prod)"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("FUNCTION_LOG_DEBUG_LOGGING", "false").lower() == "true",
        description="Enable debug logging for scan operations"
    )

    # Display settings
    user_timezone: Optional[str] = Field(
        default_factory=lambda: os.getenv("FUNCTION_LOG_USER_TIMEZONE"),
        description="Timezone returned views are converted to (storage stays UTC)"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('table_name')
    @classmethod
    def validate_table_name(cls, v):
        """Validate base table name."""
        if not v or not v.strip():
            raise ValueError("Table name is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_environments = ['dev', 'test', 'staging', 'prod']
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator('user_timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Validate timezone string."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid timezone: {v}. Please use a valid IANA timezone identifier.") from e
        return v

    def get_table_name(self, base_name: Optional[str] = None) -> str:
        """Get the full table name with prefix and environment.

        Args:
            base_name: Base table name (defaults to the configured log table)

        Returns:
            Full table name with prefix and environment
        """
        parts = []

        if self.table_prefix:
            parts.append(self.table_prefix)

        if self.environment != "prod":
            parts.append(self.environment)

        parts.append(base_name or self.table_name)

        return "_".join(parts)

    def configure_logging(self) -> None:
        """Raise the package logger to DEBUG when debug logging is enabled."""
        if self.enable_debug_logging:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)

    @classmethod
    def from_env(cls) -> 'LogReaderConfig':
        """Create configuration from environment variables.

        Returns:
            LogReaderConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'LogReaderConfig':
        """Create configuration for local DynamoDB development.

        Returns:
            LogReaderConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            environment="dev",
            enable_debug_logging=True
        )

    model_config = ConfigDict(
        validate_assignment=True
    )
