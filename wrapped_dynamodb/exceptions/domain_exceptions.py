"""
Domain Exceptions for the Wrapped DynamoDB Client

Every exception extends WrappedDynamoDBError. They fall into four groups:

1. Argument Errors - raised before any request leaves the process
2. Backend Errors - the store rejected or failed a request
3. Capacity Errors - a bounded backoff policy gave up on unprocessed items
4. Cancellation - the caller's cancellation signal was observed
"""

from typing import Any, Dict, Optional

from .base import WrappedDynamoDBError


# =============================================================================
# Argument Errors
# =============================================================================

class InvalidArgumentError(WrappedDynamoDBError):
    """Raised when an argument fails validation.

    Used for:
    - Empty or non-string table names
    - Empty, mixed-kind or non-mapping operation lists
    - Missing key attributes when projecting keys out of items
    - Loggers lacking the info/error/debug levels

    Never retried.
    """

    def __init__(self, name: str, value: Any = None, reason: Optional[str] = None):
        """Initialize invalid argument error.

        Args:
            name: Name of the offending argument (e.g. 'tableName', 'item array')
            value: The rejected value
            reason: Optional detail appended to the message
        """
        self.name = name
        self.value = value
        message = f"invalid {name}"
        if reason:
            message += f": {reason}"
        super().__init__(message, context={'argument': name})


# =============================================================================
# Backend Errors
# =============================================================================

class BackendError(WrappedDynamoDBError):
    """Raised when a store request fails.

    Not retried by the client. Context always names the table and the store
    operation; bulk operations add the operation kind, chunk index and attempt.
    """

    retryable = False

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.table_name = table_name
        self.operation = operation
        merged = dict(context or {})
        if table_name:
            merged.setdefault('table_name', table_name)
        if operation:
            merged.setdefault('operation', operation)
        super().__init__(message, original_error, merged)

    @property
    def error_code(self) -> Optional[str]:
        """DynamoDB error code of the underlying botocore error, if any."""
        response = getattr(self.original_error, 'response', None)
        if isinstance(response, dict):
            return response.get('Error', {}).get('Code')
        return None


class ThrottlingError(BackendError):
    """Request rejected because throughput or request limits were exceeded."""

    retryable = True


class ConditionFailedError(BackendError):
    """Conditional check or transaction condition failed."""


class ResourceNotFoundError(BackendError):
    """Table (or index) does not exist or is not ACTIVE."""


class ResourceInUseError(BackendError):
    """Table already exists or is being created/deleted."""


class AccessDeniedError(BackendError):
    """Credentials were rejected or lack permission."""


class StoreValidationError(BackendError):
    """The store rejected the request shape (ValidationException)."""


# =============================================================================
# Capacity Errors
# =============================================================================

class CapacityExceededError(WrappedDynamoDBError):
    """Raised when a bounded backoff policy runs out of attempts.

    Only possible when ``max_attempts`` is configured; the default policy
    keeps retrying unprocessed items indefinitely.
    """

    def __init__(self, table_name: str, unprocessed_count: int, attempts: int):
        self.table_name = table_name
        self.unprocessed_count = unprocessed_count
        self.attempts = attempts
        message = (
            f"{unprocessed_count} items still unprocessed on table {table_name} "
            f"after {attempts} attempts"
        )
        super().__init__(message, context={
            'table_name': table_name,
            'unprocessed_count': unprocessed_count,
            'attempts': attempts,
        })


# =============================================================================
# Cancellation
# =============================================================================

class OperationCancelledError(WrappedDynamoDBError):
    """Raised when the caller's cancellation signal is set at a suspension point."""

    def __init__(self, operation: str, table_name: str):
        self.operation = operation
        self.table_name = table_name
        super().__init__(
            f"{operation} on table {table_name} cancelled",
            context={'table_name': table_name, 'operation': operation},
        )
