"""
Tests for operation, result and backoff models.
"""

import pytest
from pydantic import ValidationError

from wrapped_dynamodb.exceptions import BackendError, InvalidArgumentError
from wrapped_dynamodb.models import (
    BackoffPolicy,
    DeleteOperation,
    Operation,
    OperationKind,
    Page,
    PutOperation,
    SettledResult,
    SettledStatus,
    build_operations,
)
from wrapped_dynamodb.models.results import first_failure


class TestOperations:
    """Put and delete operations."""

    def test_put_request_shape(self):
        operation = PutOperation(item={'id': 'a', 'count': 3})

        assert operation.kind is OperationKind.PUT
        assert operation.payload == {'id': 'a', 'count': 3}
        assert operation.to_request() == {'PutRequest': {'Item': {'id': 'a', 'count': 3}}}

    def test_delete_request_shape(self):
        operation = DeleteOperation(key={'id': 'a'})

        assert operation.kind is OperationKind.DELETE
        assert operation.to_request() == {'DeleteRequest': {'Key': {'id': 'a'}}}

    def test_from_request(self):
        """Test UnprocessedItems entries turn back into operations."""
        assert Operation.from_request({'PutRequest': {'Item': {'id': 'a'}}}) == PutOperation(item={'id': 'a'})
        assert Operation.from_request({'DeleteRequest': {'Key': {'id': 'b'}}}) == DeleteOperation(key={'id': 'b'})

    def test_from_unknown_request(self):
        with pytest.raises(InvalidArgumentError, match="expected PutRequest or DeleteRequest"):
            Operation.from_request({'UpdateRequest': {}})

    def test_operations_are_frozen(self):
        operation = PutOperation(item={'id': 'a'})

        with pytest.raises(ValidationError):
            operation.item = {'id': 'b'}

    def test_build_operations(self):
        """Test payloads are wrapped in input order."""
        operations = build_operations(OperationKind.DELETE, [{'id': 1}, {'id': 2}])

        assert operations == [DeleteOperation(key={'id': 1}), DeleteOperation(key={'id': 2})]

    def test_build_operations_rejects_non_mappings(self):
        with pytest.raises(InvalidArgumentError, match="invalid item array"):
            build_operations(OperationKind.PUT, [{'id': 1}, "not-an-item"])


class TestSettledResult:

    def test_fulfilled(self):
        result = SettledResult.fulfilled(2, 25, 3, {'UnprocessedItems': {}})

        assert result.ok
        assert result.status is SettledStatus.FULFILLED
        assert result.value == {'UnprocessedItems': {}}
        assert result.error is None

    def test_rejected(self):
        error = BackendError("boom")
        result = SettledResult.rejected(0, 5, 1, error)

        assert not result.ok
        assert result.value is error
        assert result.response is None

    def test_first_failure_uses_lowest_chunk_index(self):
        later = BackendError("later")
        earlier = BackendError("earlier")
        results = [
            SettledResult.rejected(3, 1, 1, later),
            SettledResult.fulfilled(0, 25, 1, {}),
            SettledResult.rejected(1, 25, 1, earlier),
        ]

        assert first_failure(results) is earlier

    def test_first_failure_none_when_all_fulfilled(self):
        assert first_failure([SettledResult.fulfilled(0, 1, 1, {})]) is None


class TestPage:

    def test_is_last(self):
        assert Page(items=[{'id': 1}]).is_last
        assert not Page(items=[], next_cursor={'id': 1}).is_last


class TestBackoffPolicy:
    """Delay schedule for unprocessed items."""

    def test_default_schedule(self):
        """Test no wait before the first call, then 0.1s doubling."""
        policy = BackoffPolicy()

        assert policy.delay_before(1) == 0
        assert [policy.delay_before(n) for n in range(2, 7)] == pytest.approx([0.1, 0.2, 0.4, 0.8, 1.6])

    def test_default_is_unbounded(self):
        policy = BackoffPolicy()

        assert not policy.bounded
        assert policy.allows(1_000)
        assert policy.delay_before(30) == pytest.approx(0.1 * 2 ** 28)

    def test_max_delay(self):
        policy = BackoffPolicy(max_delay=1.0)

        assert policy.delay_before(5) == pytest.approx(0.8)
        assert policy.delay_before(6) == 1.0
        assert policy.delay_before(40) == 1.0

    def test_max_attempts(self):
        policy = BackoffPolicy(max_attempts=4)

        assert policy.bounded
        assert policy.allows(4)
        assert not policy.allows(5)

    def test_custom_multiplier(self):
        policy = BackoffPolicy(initial_delay=0.5, multiplier=3)

        assert [policy.delay_before(n) for n in range(2, 5)] == pytest.approx([0.5, 1.5, 4.5])

    @pytest.mark.parametrize("field, value", [
        ('initial_delay', 0),
        ('multiplier', 0.5),
        ('max_delay', -1),
        ('max_attempts', 0),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            BackoffPolicy(**{field: value})
