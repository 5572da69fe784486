import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from function_log_reader.config import PACKAGE_LOGGER, LogReaderConfig


class TestLogReaderConfig:
    """Test cases for LogReaderConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {"AWS_REGION": "us-west-2"}):
            config = LogReaderConfig()

            assert config.region_name == "us-west-2"
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 30.0

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:8000",
            "DYNAMODB_TABLE_PREFIX": "test",
            "FUNCTION_LOG_TABLE": "host_logs",
            "FUNCTION_LOG_CREATE_TABLE": "false",
            "FUNCTION_LOG_USER_TIMEZONE": "Europe/Berlin",
            "FUNCTION_LOG_DEBUG_LOGGING": "true",
            "ENVIRONMENT": "staging"
        }

        with patch.dict(os.environ, env_vars):
            config = LogReaderConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.endpoint_url == "http://localhost:8000"
            assert config.table_prefix == "test"
            assert config.table_name == "host_logs"
            assert config.create_table_if_missing is False
            assert config.user_timezone == "Europe/Berlin"
            assert config.enable_debug_logging is True
            assert config.environment == "staging"

    def test_table_name_generation(self):
        """Test table name generation with prefix and environment."""
        config = LogReaderConfig(table_prefix="myapp", environment="dev", table_name="function_logs")

        assert config.get_table_name() == "myapp_dev_function_logs"
        assert config.get_table_name("other") == "myapp_dev_other"

    def test_table_name_generation_prod(self):
        """Test table name generation in production (no environment suffix)."""
        config = LogReaderConfig(table_prefix="myapp", environment="prod", table_name="function_logs")

        assert config.get_table_name() == "myapp_function_logs"

    def test_table_name_without_prefix(self):
        config = LogReaderConfig(table_prefix="", environment="test", table_name="function_logs")

        assert config.get_table_name() == "test_function_logs"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            LogReaderConfig(environment="qa")

    def test_invalid_timezone(self):
        with pytest.raises(ValidationError) as exc_info:
            LogReaderConfig(user_timezone="Mars/Olympus_Mons")

        assert "Invalid timezone" in str(exc_info.value)

    def test_blank_table_name(self):
        with pytest.raises(ValidationError):
            LogReaderConfig(table_name="  ")

    def test_assignment_is_validated(self):
        config = LogReaderConfig(environment="dev")

        with pytest.raises(ValidationError):
            config.environment = "qa"

    def test_local_development_config(self):
        config = LogReaderConfig.for_local_development()

        assert config.endpoint_url == "http://localhost:8000"
        assert config.environment == "dev"
        assert config.enable_debug_logging is True

    def test_configure_logging_raises_package_level(self):
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        previous = package_logger.level
        try:
            LogReaderConfig(enable_debug_logging=True).configure_logging()
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)

    def test_configure_logging_leaves_level_alone_by_default(self):
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        previous = package_logger.level

        LogReaderConfig(enable_debug_logging=False).configure_logging()

        assert package_logger.level == previous
