"""
Full-table purge.

Scans the table page by page, reduces every returned item to its primary key
and deletes the page through BulkReconciler before reading the next one.
The loop stops on the first page that has neither items nor a cursor; a
page with items but no cursor restarts the scan, which is how the final
empty read confirms the table is clean.

Purging is not atomic: deletes already applied stay applied when a later
page fails, and re-running the purge simply finds fewer items.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

from ..exceptions import BackendError, WrappedDynamoDBError
from ..log import SupportsLogging, resolve_logger
from ..models import DeleteOperation, Page, first_failure
from ..validation import project_key, validate_key_attribute_names, validate_table_name
from .reconciler import BulkReconciler, check_cancelled
from .store_client import StoreClient


class TablePurger:
    """Delete every item of a table using paginated scans and bulk deletes."""

    def __init__(
        self,
        store: StoreClient,
        reconciler: BulkReconciler,
        logger: Optional[SupportsLogging] = None,
    ):
        self.store = store
        self.reconciler = reconciler
        self.logger = resolve_logger(logger, logging.getLogger(__name__))

    async def purge(
        self,
        table_name: str,
        key_attribute_names: Sequence[str],
        page_size: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> int:
        """
        Remove all items from ``table_name``.

        Args:
            table_name: Table to purge
            key_attribute_names: Partition key name, plus sort key name for composite keys
            page_size: Optional Scan ``Limit`` per page
            cancel_event: Optional signal checked before each read and each bulk delete

        Returns:
            Total number of items purged

        Raises:
            InvalidArgumentError: Bad table name or key attribute list, or an item lacks a key attribute
            BackendError: A scan or a bulk delete chunk failed
            CapacityExceededError: A bounded backoff policy gave up on a chunk
            OperationCancelledError: cancel_event was set
        """
        validate_table_name(self.logger, table_name)
        validate_key_attribute_names(self.logger, key_attribute_names)

        self.logger.debug(f"Purging DynamoDB table '{table_name}'...")

        options = {'Limit': page_size} if page_size else {}
        purged = 0
        cursor = None
        while True:
            check_cancelled(cancel_event, "Scan", table_name)
            page = await self._read_page(table_name, cursor, **options)

            if page.items:
                keys = [
                    DeleteOperation(key=project_key(self.logger, item, key_attribute_names))
                    for item in page.items
                ]
                check_cancelled(cancel_event, "BatchWriteItem", table_name)
                results = await self.reconciler.reconcile(table_name, keys, cancel_event)
                error = first_failure(results)
                if error is not None:
                    self.logger.error(f"Purge of table '{table_name}' aborted after {purged} items.")
                    raise error

                purged += len(page.items)
                self.logger.debug(f"  Purged {purged} items.")

            cursor = page.next_cursor
            if not page.items and cursor is None:
                break

        self.logger.debug(f"Purged {purged} items from table '{table_name}'.")
        return purged

    async def _read_page(self, table_name: str, cursor: Optional[Any], **options: Any) -> Page:
        try:
            return await self.store.read_page(table_name, cursor, **options)
        except WrappedDynamoDBError:
            raise
        except Exception as e:
            raise BackendError(
                f"Scan on {table_name} failed: {e}",
                table_name=table_name,
                operation="Scan",
                original_error=e,
            ) from e
