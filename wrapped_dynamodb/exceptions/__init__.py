# Base exception class
from .base import WrappedDynamoDBError

from .domain_exceptions import (
    AccessDeniedError,
    BackendError,
    CapacityExceededError,
    ConditionFailedError,
    InvalidArgumentError,
    OperationCancelledError,
    ResourceInUseError,
    ResourceNotFoundError,
    StoreValidationError,
    ThrottlingError,
)

__all__ = [
    # Base exception
    "WrappedDynamoDBError",

    # Domain exceptions (alphabetically ordered)
    "AccessDeniedError",
    "BackendError",
    "CapacityExceededError",
    "ConditionFailedError",
    "InvalidArgumentError",
    "OperationCancelledError",
    "ResourceInUseError",
    "ResourceNotFoundError",
    "StoreValidationError",
    "ThrottlingError",
]
