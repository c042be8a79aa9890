from .config import DynamoDBConfig
from .client import WrappedDynamoDBClient
from .core import (
    BulkReconciler,
    DynamoDBStoreClient,
    StoreClient,
    TablePurger,
)
from .exceptions import (
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
    WrappedDynamoDBError,
)
from .log import SupportsLogging
from .models import (
    BackoffPolicy,
    BatchWriteResult,
    DeleteOperation,
    Operation,
    OperationKind,
    Page,
    PutOperation,
    SettledResult,
    SettledStatus,
    build_operations,
)

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Client facade
    "WrappedDynamoDBClient",

    # Core
    "BulkReconciler",
    "DynamoDBStoreClient",
    "StoreClient",
    "TablePurger",

    # Exceptions
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
    "WrappedDynamoDBError",

    # Logging
    "SupportsLogging",

    # Models
    "BackoffPolicy",
    "BatchWriteResult",
    "DeleteOperation",
    "Operation",
    "OperationKind",
    "Page",
    "PutOperation",
    "SettledResult",
    "SettledStatus",
    "build_operations",
]
