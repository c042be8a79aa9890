"""
Wrapped DynamoDB Client

Asynchronous facade over DynamoDB that gives every table and item operation
the same treatment:

- Arguments are validated before a request is sent (InvalidArgumentError)
- Each request is logged: debug for item traffic, info for table lifecycle,
  error for failures
- Store failures surface as BackendError subclasses carrying table/operation context
- Bulk puts and deletes go through BulkReconciler (25-item chunks,
  concurrent, unprocessed items retried with exponential backoff)
- Purging a table goes through TablePurger (paginated scan + bulk delete)

Example:
    client = WrappedDynamoDBClient(DynamoDBConfig.for_local_development())
    await client.put_items('orders', orders)
    purged = await client.purge_items('orders', ['order_id'])
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .config import MAX_TRANSACTION_SIZE, DynamoDBConfig
from .core import BulkReconciler, DynamoDBStoreClient, TablePurger
from .exceptions import BackendError, WrappedDynamoDBError
from .log import SupportsLogging, resolve_logger
from .models import AnyOperation, OperationKind, SettledResult, build_operations
from .utils import build_projection, http_status
from .validation import (
    validate_attribute_list,
    validate_item,
    validate_items,
    validate_key_schema,
    validate_param,
    validate_table_name,
)


class WrappedDynamoDBClient:
    """Wraps a DynamoDB store client to provide standard logging, validation and bulk services."""

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        logger: Optional[SupportsLogging] = None,
        log_internals: Optional[bool] = None,
        store: Optional[DynamoDBStoreClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            config: Connection and bulk settings (defaults to environment-derived config)
            logger: Logger with info, error and debug methods (defaults to this module's logger)
            log_internals: Override config.log_internals (boto3/botocore debug logging)
            store: Pre-built store client, mainly for tests
            sleep: Coroutine used for backoff waits between bulk retries
        """
        config = config or DynamoDBConfig()
        if log_internals is not None and log_internals != config.log_internals:
            config = config.model_copy(update={'log_internals': log_internals})
        self.config = config
        self.logger = resolve_logger(logger, logging.getLogger(__name__))

        self.store = store if store is not None else DynamoDBStoreClient(config, self.logger)
        self.reconciler = BulkReconciler(
            self.store,
            backoff=config.backoff_policy(),
            batch_size=config.batch_size,
            logger=self.logger,
            sleep=sleep,
        )
        self.purger = TablePurger(self.store, self.reconciler, logger=self.logger)

    async def _send(self, failure_message: str, request: Awaitable[Any]) -> Any:
        try:
            return await request
        except WrappedDynamoDBError as e:
            self.logger.error(f"{failure_message} {e}")
            raise

    # =========================================================================
    # Tables
    # =========================================================================

    async def create_table(self, table_name: str, **options: Any) -> Dict[str, Any]:
        """
        Create a table and wait until it is ACTIVE.

        Args:
            table_name: Table name
            **options: CreateTable parameters (KeySchema, AttributeDefinitions, BillingMode...)

        Returns:
            Table description of the created table
        """
        validate_table_name(self.logger, table_name)
        validate_key_schema(self.logger, options.get('KeySchema'))

        self.logger.debug(f"Creating table {table_name}... {options}")
        response = await self._send(
            f"Table {table_name} creation request failed.",
            self.store.create_table(table_name, **options),
        )
        if not response.get('TableDescription', {}).get('TableStatus'):
            self.logger.error(f"Table {table_name} creation request failed. {response}")
            raise BackendError(f"CreateTable on {table_name} returned no table status",
                               table_name=table_name, operation="CreateTable")
        self.logger.info(f"Table {table_name} creation requested.")
        self.logger.debug(response)

        self.logger.info(f"Awaiting table {table_name} creation...")
        await self._send(f"Table {table_name} creation failed.", self.store.wait_for_table(table_name, exists=True))
        self.logger.info(f"Table {table_name} created.")

        return await self.describe_table(table_name)

    async def delete_table(self, table_name: str) -> Dict[str, Any]:
        """Delete a table and wait until it is gone.

        Returns:
            Table description returned by DeleteTable
        """
        validate_table_name(self.logger, table_name)

        self.logger.info(f"Deleting table {table_name}...")
        response = await self._send(
            f"Table {table_name} deletion request failed.",
            self.store.delete_table(table_name),
        )
        self.logger.info(f"Table {table_name} deletion requested.")
        self.logger.debug(response)

        self.logger.info(f"Awaiting table {table_name} deletion...")
        await self._send(f"Table {table_name} deletion failed.", self.store.wait_for_table(table_name, exists=False))
        self.logger.info(f"Table {table_name} deleted.")

        return response.get('TableDescription', {})

    async def describe_table(self, table_name: str) -> Dict[str, Any]:
        validate_table_name(self.logger, table_name)

        self.logger.info(f"Describing table {table_name}...")
        response = await self._send(
            f"Table {table_name} description request failed.",
            self.store.describe_table(table_name),
        )
        self.logger.info(f"Table {table_name} description requested.")
        self.logger.debug(response)

        return response['Table']

    # =========================================================================
    # Single items
    # =========================================================================

    async def get_item(
        self,
        table_name: str,
        key: Mapping[str, Any],
        attributes: Union[str, Sequence[str], None] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item by key.

        Args:
            table_name: Table name
            key: Item key (extra non-key attributes are not allowed by DynamoDB)
            attributes: Comma-delimited string or list of attributes to retrieve

        Returns:
            The item, or None if it does not exist
        """
        validate_table_name(self.logger, table_name)
        validate_item(self.logger, key)
        projection = build_projection(validate_attribute_list(self.logger, attributes) or [])

        self.logger.debug(f"Getting item from table {table_name}... {dict(key)}")
        response = await self._send(
            f"Failed to get item from table {table_name}.",
            self.store.get_item(table_name, dict(key), **projection),
        )
        self.logger.debug(f"Got item from table {table_name}. {response}")

        return response.get('Item')

    async def put_item(self, table_name: str, item: Mapping[str, Any]) -> Dict[str, Any]:
        validate_table_name(self.logger, table_name)
        validate_item(self.logger, item)

        self.logger.debug(f"Putting item to table {table_name}... {dict(item)}")
        response = await self._send(
            f"Failed to put item to table {table_name}.",
            self.store.put_item(table_name, dict(item)),
        )
        if http_status(response) == 200:
            self.logger.debug(f"Put item to table {table_name}. {response}")
        else:
            self.logger.error(f"Failed to put item to table {table_name}. {response}")

        return response

    async def delete_item(self, table_name: str, key: Mapping[str, Any]) -> Dict[str, Any]:
        validate_table_name(self.logger, table_name)
        validate_item(self.logger, key)

        self.logger.debug(f"Deleting item from table {table_name}... {dict(key)}")
        response = await self._send(
            f"Failed to delete item from table {table_name}.",
            self.store.delete_item(table_name, dict(key)),
        )
        self.logger.debug(f"Deleted item from table {table_name}. {response}")

        return response

    # =========================================================================
    # Reads
    # =========================================================================

    async def query(self, table_name: str, **options: Any) -> Dict[str, Any]:
        """Run a Query and return the raw response (Items, LastEvaluatedKey...)."""
        validate_table_name(self.logger, table_name)

        self.logger.debug(f"Querying table {table_name}... {options}")
        response = await self._send(f"Failed to query table {table_name}.", self.store.query(table_name, **options))
        self.logger.debug(f"Queried table {table_name}. {response}")

        return response

    async def scan(self, table_name: str, **options: Any) -> Dict[str, Any]:
        """Run a Scan and return the raw response (Items, LastEvaluatedKey...)."""
        validate_table_name(self.logger, table_name)

        self.logger.debug(f"Scanning table {table_name}... {options}")
        response = await self._send(f"Failed to scan table {table_name}.", self.store.scan(table_name, **options))
        self.logger.debug(f"Scanned table {table_name}. {response}")

        return response

    # =========================================================================
    # Bulk
    # =========================================================================

    async def reconcile(
        self,
        table_name: str,
        operations: Sequence[AnyOperation],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[SettledResult]:
        """Apply a list of put (or delete) operations; see BulkReconciler.reconcile."""
        return await self.reconciler.reconcile(table_name, operations, cancel_event)

    async def put_items(
        self,
        table_name: str,
        items: Sequence[Mapping[str, Any]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[SettledResult]:
        """
        Put many items in 25-item chunks, retrying unprocessed items.

        Returns:
            One SettledResult per chunk; check ``result.ok`` on each
        """
        validate_table_name(self.logger, table_name)
        validate_items(self.logger, items)

        results = await self.reconciler.reconcile(
            table_name, build_operations(OperationKind.PUT, items), cancel_event
        )
        self.logger.debug(f"Put items to table {table_name}. {[result.value for result in results]}")
        return results

    async def delete_items(
        self,
        table_name: str,
        keys: Sequence[Mapping[str, Any]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[SettledResult]:
        """
        Delete many items by key in 25-item chunks, retrying unprocessed items.

        Returns:
            One SettledResult per chunk; check ``result.ok`` on each
        """
        validate_table_name(self.logger, table_name)
        validate_items(self.logger, keys)

        results = await self.reconciler.reconcile(
            table_name, build_operations(OperationKind.DELETE, keys), cancel_event
        )
        self.logger.debug(f"Deleted items from table {table_name}. {[result.value for result in results]}")
        return results

    async def purge_items(
        self,
        table_name: str,
        key_attribute_names: Sequence[str],
        page_size: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> int:
        """Purge all items from a table; see TablePurger.purge.

        Returns:
            Total items purged from the table
        """
        return await self.purger.purge(table_name, key_attribute_names, page_size, cancel_event)

    # =========================================================================
    # Transactions
    # =========================================================================

    async def transact_put_items(self, table_name: str, items: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Put up to 100 items as a single all-or-nothing transaction."""
        return await self._transact(table_name, items, OperationKind.PUT)

    async def transact_delete_items(self, table_name: str, keys: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        """Delete up to 100 items as a single all-or-nothing transaction."""
        return await self._transact(table_name, keys, OperationKind.DELETE)

    async def _transact(
        self, table_name: str, payloads: Sequence[Mapping[str, Any]], kind: OperationKind
    ) -> Dict[str, Any]:
        validate_table_name(self.logger, table_name)
        validate_items(self.logger, payloads)
        validate_param(
            self.logger, 'item array', payloads,
            lambda v: len(v) <= MAX_TRANSACTION_SIZE,
            f"a transaction holds at most {MAX_TRANSACTION_SIZE} items",
        )

        if kind is OperationKind.PUT:
            self.logger.debug(f"Putting {len(payloads)} items in a single transaction to table {table_name}...")
            transact_items = [{'Put': {'Item': dict(item), 'TableName': table_name}} for item in payloads]
        else:
            self.logger.debug(f"Deleting {len(payloads)} items in a single transaction from table {table_name}...")
            transact_items = [{'Delete': {'Key': dict(key), 'TableName': table_name}} for key in payloads]

        response = await self._send(
            f"Transaction on table {table_name} failed.",
            self.store.transact_write(table_name, transact_items),
        )
        self.logger.debug("Done.")

        return response
