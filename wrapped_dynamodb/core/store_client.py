"""
DynamoDB Store Client

The bulk algorithms only need two things from the store: submit one
BatchWriteItem request and read one Scan page. ``StoreClient`` names that
capability; ``DynamoDBStoreClient`` provides it on top of boto3, together
with the thin single-request pass-throughs used by the client facade
(table lifecycle, get/put/delete item, query, scan, transactions).

boto3 is synchronous, so every request runs through ``asyncio.to_thread``.
One lazily created boto3 resource supplies the low-level client that every
request is sent through; boto3 clients are thread-safe, resources are not,
so no request touches the resource or its Table handles from a worker thread.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import (
    AccessDeniedError,
    BackendError,
    ConditionFailedError,
    ResourceInUseError,
    ResourceNotFoundError,
    StoreValidationError,
    ThrottlingError,
)
from ..log import SupportsLogging, enable_internal_logging, resolve_logger
from ..models import BatchWriteResult, Operation, Page

logger = logging.getLogger(__name__)

_ERROR_CLASSES = {
    'ConditionalCheckFailedException': ConditionFailedError,
    'TransactionCanceledException': ConditionFailedError,
    'ResourceNotFoundException': ResourceNotFoundError,
    'ResourceInUseException': ResourceInUseError,
    'ValidationException': StoreValidationError,
    'ProvisionedThroughputExceededException': ThrottlingError,
    'RequestLimitExceeded': ThrottlingError,
    'ThrottlingException': ThrottlingError,
    'AccessDeniedException': AccessDeniedError,
    'UnrecognizedClientException': AccessDeniedError,
    'ExpiredTokenException': AccessDeniedError,
}

_KNOWN_GENERIC_CODES = {'InternalServerError', 'ServiceUnavailable', 'LimitExceededException'}


def map_dynamodb_error(error: ClientError, operation: str, table_name: str) -> BackendError:
    """Map a botocore ClientError to a BackendError subclass.

    Args:
        error: The botocore ClientError
        operation: The store operation that failed (e.g. "BatchWriteItem", "Scan")
        table_name: The DynamoDB table name

    Returns:
        BackendError (or subclass) carrying table and operation context
    """
    error_code = error.response.get('Error', {}).get('Code', 'Unknown')
    error_message = error.response.get('Error', {}).get('Message', str(error))

    error_class = _ERROR_CLASSES.get(error_code)
    if error_class is None:
        if error_code not in _KNOWN_GENERIC_CODES:
            logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to BackendError")
        error_class = BackendError

    return error_class(
        f"{operation} on {table_name} failed ({error_code}): {error_message}",
        table_name=table_name,
        operation=operation,
        original_error=error,
    )


@runtime_checkable
class StoreClient(Protocol):
    """Store capability consumed by BulkReconciler and TablePurger."""

    async def batch_write(self, table_name: str, operations: Sequence[Operation]) -> BatchWriteResult:
        """Apply up to 25 put/delete operations; return whichever were not applied."""
        ...

    async def read_page(self, table_name: str, cursor: Optional[Any] = None, **options: Any) -> Page:
        """Read one page of a full-table scan, resuming from ``cursor``."""
        ...


class DynamoDBStoreClient:
    """
    boto3-backed store client.

    Exposes each DynamoDB request the wrapped client needs as a coroutine and
    maps botocore failures to BackendError subclasses. No validation and no
    retries beyond botocore's own transport retries happen here.
    """

    def __init__(self, config: Optional[DynamoDBConfig] = None, logger: Optional[SupportsLogging] = None):
        """Initialize store client.

        Args:
            config: DynamoDB configuration (defaults to environment-derived config)
            logger: Logger for connection failures (defaults to this module's logger)
        """
        self.config = config or DynamoDBConfig()
        self.logger = resolve_logger(logger, logging.getLogger(__name__))
        self._dynamodb = None

        if self.config.log_internals:
            enable_internal_logging()

    @property
    def dynamodb(self):
        """Lazy initialization of the DynamoDB service resource."""
        if self._dynamodb is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    aws_session_token=self.config.aws_session_token,
                    profile_name=self.config.profile_name,
                    region_name=self.config.region_name
                )

                resource_kwargs = {
                    'region_name': self.config.region_name,
                    'config': Config(
                        retries={'max_attempts': self.config.retries},
                        max_pool_connections=self.config.max_pool_connections,
                        read_timeout=self.config.timeout_seconds,
                        connect_timeout=self.config.timeout_seconds
                    )
                }
                if self.config.endpoint_url:
                    resource_kwargs['endpoint_url'] = self.config.endpoint_url

                self._dynamodb = session.resource('dynamodb', **resource_kwargs)
            except Exception as e:
                self.logger.error(f"Failed to create DynamoDB resource: {e}")
                raise BackendError(f"Failed to connect to DynamoDB: {e}", original_error=e) from e
        return self._dynamodb

    @property
    def client(self):
        """Low-level client carrying the resource's type serialization.

        Every request goes through this client: it is thread-safe, while the
        resource and its Table handles must not be shared across worker threads.
        """
        return self.dynamodb.meta.client

    async def _call(self, operation: str, table_name: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except ClientError as e:
            raise map_dynamodb_error(e, operation, table_name) from e
        except BotoCoreError as e:
            raise BackendError(
                f"{operation} on {table_name} failed: {e}",
                table_name=table_name,
                operation=operation,
                original_error=e,
            ) from e

    # -------------------------------------------------------------------------
    # Bulk capability
    # -------------------------------------------------------------------------

    async def batch_write(self, table_name: str, operations: Sequence[Operation]) -> BatchWriteResult:
        response = await self._call(
            "BatchWriteItem", table_name, self.client.batch_write_item,
            RequestItems={table_name: [operation.to_request() for operation in operations]},
        )
        unprocessed = (response.get('UnprocessedItems') or {}).get(table_name, [])
        return BatchWriteResult(
            unprocessed=[Operation.from_request(request) for request in unprocessed],
            response=response,
        )

    async def read_page(self, table_name: str, cursor: Optional[Any] = None, **options: Any) -> Page:
        if cursor is not None:
            options['ExclusiveStartKey'] = cursor
        response = await self.scan(table_name, **options)
        return Page(
            items=response.get('Items', []),
            next_cursor=response.get('LastEvaluatedKey'),
            response=response,
        )

    # -------------------------------------------------------------------------
    # Single-request pass-throughs
    # -------------------------------------------------------------------------

    async def create_table(self, table_name: str, **options: Any) -> Dict[str, Any]:
        return await self._call("CreateTable", table_name, self.client.create_table,
                                **{**options, 'TableName': table_name})

    async def delete_table(self, table_name: str) -> Dict[str, Any]:
        return await self._call("DeleteTable", table_name, self.client.delete_table, TableName=table_name)

    async def describe_table(self, table_name: str) -> Dict[str, Any]:
        return await self._call("DescribeTable", table_name, self.client.describe_table, TableName=table_name)

    async def wait_for_table(self, table_name: str, exists: bool = True) -> None:
        """Poll until the table exists (or no longer exists)."""
        waiter = self.client.get_waiter('table_exists' if exists else 'table_not_exists')
        await self._call(
            "WaitForTable", table_name, waiter.wait,
            TableName=table_name,
            WaiterConfig={
                'Delay': self.config.table_wait_delay_seconds,
                'MaxAttempts': self.config.table_wait_max_attempts,
            },
        )

    async def get_item(self, table_name: str, key: Dict[str, Any], **options: Any) -> Dict[str, Any]:
        return await self._call("GetItem", table_name, self.client.get_item,
                                TableName=table_name, Key=key, **options)

    async def put_item(self, table_name: str, item: Dict[str, Any], **options: Any) -> Dict[str, Any]:
        return await self._call("PutItem", table_name, self.client.put_item,
                                TableName=table_name, Item=item, **options)

    async def delete_item(self, table_name: str, key: Dict[str, Any], **options: Any) -> Dict[str, Any]:
        return await self._call("DeleteItem", table_name, self.client.delete_item,
                                TableName=table_name, Key=key, **options)

    async def query(self, table_name: str, **options: Any) -> Dict[str, Any]:
        return await self._call("Query", table_name, self.client.query,
                                TableName=table_name, **options)

    async def scan(self, table_name: str, **options: Any) -> Dict[str, Any]:
        return await self._call("Scan", table_name, self.client.scan,
                                TableName=table_name, **options)

    async def transact_write(self, table_name: str, transact_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._call("TransactWriteItems", table_name, self.client.transact_write_items,
                                TransactItems=transact_items)
