import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from wrapped_dynamodb.config import DynamoDBConfig
from wrapped_dynamodb.models import BackoffPolicy


class TestDynamoDBConfig:
    """Test cases for DynamoDBConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            config = DynamoDBConfig()

            assert config.region_name == "us-east-1"
            assert config.endpoint_url is None
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 30.0
            assert config.batch_size == 25
            assert config.backoff_initial_delay == 0.1
            assert config.backoff_max_delay is None
            assert config.backoff_max_attempts is None
            assert config.table_wait_max_seconds == 60
            assert config.log_internals is False

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "AWS_PROFILE": "staging",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:8000",
            "DYNAMODB_BACKOFF_MAX_DELAY": "5",
            "DYNAMODB_BACKOFF_MAX_ATTEMPTS": "8",
            "DYNAMODB_LOG_INTERNALS": "true",
        }

        with patch.dict(os.environ, env_vars):
            config = DynamoDBConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.profile_name == "staging"
            assert config.endpoint_url == "http://localhost:8000"
            assert config.backoff_max_delay == 5.0
            assert config.backoff_max_attempts == 8
            assert config.log_internals is True

    @pytest.mark.parametrize("name", ["DYNAMODB_BACKOFF_MAX_DELAY", "DYNAMODB_BACKOFF_MAX_ATTEMPTS"])
    def test_malformed_backoff_env_var(self, name):
        """Test a malformed backoff bound is reported as a validation error naming the field."""
        with patch.dict(os.environ, {name: "abc"}):
            with pytest.raises(ValidationError) as exc_info:
                DynamoDBConfig()

        assert exc_info.value.errors()[0]['loc'] == (name.lower().replace("dynamodb_", ""),)

    def test_empty_backoff_env_var_is_unset(self):
        with patch.dict(os.environ, {"DYNAMODB_BACKOFF_MAX_DELAY": "", "DYNAMODB_BACKOFF_MAX_ATTEMPTS": " "}):
            config = DynamoDBConfig()

        assert config.backoff_max_delay is None
        assert config.backoff_max_attempts is None

    def test_local_development_config(self):
        """Test local development configuration."""
        config = DynamoDBConfig.for_local_development()

        assert config.aws_access_key_id == "local"
        assert config.aws_secret_access_key == "local"
        assert config.endpoint_url == "http://localhost:8000"
        assert config.table_wait_delay_seconds == 1

    def test_region_validation(self):
        """Test region validation."""
        with pytest.raises(ValueError, match="AWS region name is required"):
            DynamoDBConfig(region_name="")

    @pytest.mark.parametrize("batch_size", [0, 26])
    def test_batch_size_validation(self, batch_size):
        """Test batch size must fit a single BatchWriteItem request."""
        with pytest.raises(ValueError, match="Batch size must be between 1 and 25"):
            DynamoDBConfig(batch_size=batch_size)

    def test_backoff_bounds_validation(self):
        """Test the delay ceiling cannot undercut the first delay."""
        with pytest.raises(ValueError, match="backoff_max_delay cannot be smaller"):
            DynamoDBConfig(backoff_initial_delay=1.0, backoff_max_delay=0.5)

    def test_backoff_policy(self):
        """Test backoff settings are turned into a policy."""
        config = DynamoDBConfig(backoff_initial_delay=0.2, backoff_max_delay=3.0, backoff_max_attempts=6)

        assert config.backoff_policy() == BackoffPolicy(initial_delay=0.2, max_delay=3.0, max_attempts=6)

    def test_default_backoff_policy_is_unbounded(self):
        with patch.dict(os.environ, {}, clear=True):
            assert not DynamoDBConfig().backoff_policy().bounded

    @pytest.mark.parametrize("delay, max_seconds, attempts", [
        (5, 60, 12),
        (5, 61, 13),
        (1, 10, 10),
        (20, 10, 1),
    ])
    def test_table_wait_max_attempts(self, delay, max_seconds, attempts):
        """Test waiter attempts cover the whole wait window."""
        config = DynamoDBConfig(table_wait_delay_seconds=delay, table_wait_max_seconds=max_seconds)

        assert config.table_wait_max_attempts == attempts

    def test_validate_assignment(self):
        """Test validators run on assignment too."""
        config = DynamoDBConfig()

        with pytest.raises(ValueError):
            config.batch_size = 100
