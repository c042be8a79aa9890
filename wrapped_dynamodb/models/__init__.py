# Bulk write operations
from .operations import (
    AnyOperation,
    DeleteOperation,
    Operation,
    OperationKind,
    PutOperation,
    build_operations,
)

# Store responses and chunk outcomes
from .results import (
    BatchWriteResult,
    Page,
    SettledResult,
    SettledStatus,
    first_failure,
)

# Retry schedule
from .backoff import BackoffPolicy

__all__ = [
    # Operations
    "AnyOperation",
    "DeleteOperation",
    "Operation",
    "OperationKind",
    "PutOperation",
    "build_operations",

    # Results
    "BatchWriteResult",
    "Page",
    "SettledResult",
    "SettledStatus",
    "first_failure",

    # Backoff
    "BackoffPolicy",
]
