"""
Core components of the wrapped DynamoDB client.

- StoreClient: the store capability the bulk algorithms consume
- DynamoDBStoreClient: boto3-backed StoreClient plus single-request pass-throughs
- BulkReconciler: chunked, concurrently retried bulk put/delete
- TablePurger: paginated scan + bulk delete of a whole table
"""

from .store_client import DynamoDBStoreClient, StoreClient, map_dynamodb_error
from .reconciler import BulkReconciler, check_cancelled
from .purger import TablePurger

__all__ = [
    "BulkReconciler",
    "DynamoDBStoreClient",
    "StoreClient",
    "TablePurger",
    "check_cancelled",
    "map_dynamodb_error",
]
