"""
Test configuration and fixtures for the wrapped DynamoDB client.

Unit tests use fake store clients (AsyncMock or tests.helpers.InMemoryStore);
integration tests run the boto3-backed store client against moto.
"""

from unittest.mock import AsyncMock, Mock

import boto3
import pytest
from moto import mock_aws

from wrapped_dynamodb import DynamoDBConfig, WrappedDynamoDBClient
from tests.helpers import TABLE_NAME, TABLE_OPTIONS


@pytest.fixture
def test_config():
    """DynamoDB configuration for testing (no profile, fast table waiters)."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        aws_session_token=None,
        profile_name=None,
        region_name="us-east-1",
        endpoint_url=None,
        table_wait_delay_seconds=1,
        table_wait_max_seconds=10,
        log_internals=False,
    )


@pytest.fixture
def mock_logger():
    """Logger double exposing every level the client writes to."""
    return Mock(spec=['debug', 'info', 'warning', 'error'])


@pytest.fixture
def recorded_sleep():
    """Backoff sleep that returns immediately and records requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def moto_client(test_config, recorded_sleep):
    """WrappedDynamoDBClient talking to an in-process moto DynamoDB."""
    with mock_aws():
        yield WrappedDynamoDBClient(test_config, sleep=recorded_sleep)


@pytest.fixture
def moto_table(moto_client):
    """Composite-key table created directly through boto3 inside the moto mock."""
    dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
    table = dynamodb.create_table(TableName=TABLE_NAME, **TABLE_OPTIONS)
    table.wait_until_exists()
    return table
