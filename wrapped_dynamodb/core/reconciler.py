"""
Bulk Write Reconciliation

BatchWriteItem applies at most 25 writes per call and may hand back any
subset of them as UnprocessedItems when the table is throttled. The
reconciler hides both limits:

1. The operation list is split into chunks of ``batch_size`` (25).
2. All chunks run concurrently on the event loop.
3. Each chunk resubmits only its unprocessed remainder, waiting
   0.1s, 0.2s, 0.4s... between attempts, until nothing is left.
4. Every chunk settles on its own: a store failure ends that chunk only and
   shows up as a rejected SettledResult next to its siblings' outcomes.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from ..config import MAX_BATCH_SIZE
from ..exceptions import BackendError, CapacityExceededError, OperationCancelledError, WrappedDynamoDBError
from ..log import SupportsLogging, resolve_logger, warn
from ..models import AnyOperation, BackoffPolicy, BatchWriteResult, OperationKind, SettledResult
from ..utils import chunked
from ..validation import validate_operations, validate_table_name
from .store_client import StoreClient

# Retries after which an unbounded policy is reported at warning level
LONG_RETRY_WARNING_THRESHOLD = 10

# (in progress, done, preposition) per operation kind
_WORDING = {
    OperationKind.PUT: ("Putting", "Put", "to"),
    OperationKind.DELETE: ("Deleting", "Deleted", "from"),
}


def check_cancelled(cancel_event: Optional[asyncio.Event], operation: str, table_name: str) -> None:
    """Raise OperationCancelledError if the caller asked to stop."""
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError(operation, table_name)


class BulkReconciler:
    """
    Chunked, concurrently retried BatchWriteItem submission.

    Usable directly for bulk inserts and deletes, and as the delete primitive
    behind TablePurger.
    """

    def __init__(
        self,
        store: StoreClient,
        backoff: Optional[BackoffPolicy] = None,
        batch_size: int = MAX_BATCH_SIZE,
        logger: Optional[SupportsLogging] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize reconciler.

        Args:
            store: Store client executing the BatchWriteItem requests
            backoff: Delay schedule for unprocessed items (default: unbounded 0.1s doubling)
            batch_size: Operations per request, 1..25
            logger: Logger for attempt-level diagnostics
            sleep: Coroutine used for backoff waits
        """
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self.store = store
        self.backoff = backoff or BackoffPolicy()
        self.batch_size = batch_size
        self.logger = resolve_logger(logger, logging.getLogger(__name__))
        self._sleep = sleep

    async def reconcile(
        self,
        table_name: str,
        operations: Sequence[AnyOperation],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[SettledResult]:
        """
        Apply every operation, retrying unprocessed items until the store accepts them.

        Args:
            table_name: Target table
            operations: Non-empty list of operations, all puts or all deletes
            cancel_event: Optional signal checked before each request and each backoff wait

        Returns:
            One SettledResult per chunk, ordered by chunk index

        Raises:
            InvalidArgumentError: Bad table name, empty list, or mixed puts and deletes
        """
        validate_table_name(self.logger, table_name)
        kind = validate_operations(self.logger, operations)
        doing, done, preposition = _WORDING[kind]

        chunks = list(chunked(operations, self.batch_size))
        self.logger.debug(
            f"{doing} {len(operations)} items {preposition} table {table_name} in {len(chunks)} chunks..."
        )

        results = await asyncio.gather(*(
            self._settle(table_name, kind, index, chunk, cancel_event)
            for index, chunk in enumerate(chunks)
        ))

        failed = sum(1 for result in results if not result.ok)
        if failed:
            self.logger.error(f"{failed} of {len(results)} chunks failed on table {table_name}.")
        else:
            self.logger.debug(f"{done} {len(operations)} items {preposition} table {table_name}.")
        return list(results)

    async def _settle(
        self,
        table_name: str,
        kind: OperationKind,
        index: int,
        chunk: List[AnyOperation],
        cancel_event: Optional[asyncio.Event],
    ) -> SettledResult:
        """Drive one chunk to zero unprocessed items, capturing any error as its outcome."""
        pending = chunk
        attempt = 0
        try:
            while True:
                check_cancelled(cancel_event, "BatchWriteItem", table_name)
                attempt += 1

                result = await self._submit(table_name, kind, index, attempt, pending)
                if not result.unprocessed:
                    return SettledResult.fulfilled(index, len(chunk), attempt, result.response)

                pending = result.unprocessed
                if not self.backoff.allows(attempt + 1):
                    raise CapacityExceededError(table_name, len(pending), attempt)

                delay = self.backoff.delay_before(attempt + 1)
                self.logger.debug(f"{len(pending)} items not processed, retrying in {delay:.3f}s...")
                if not self.backoff.bounded and attempt == LONG_RETRY_WARNING_THRESHOLD:
                    warn(self.logger, f"Chunk {index} on table {table_name} still has {len(pending)} "
                                      f"unprocessed items after {attempt} attempts; retrying without limit")

                check_cancelled(cancel_event, "BatchWriteItem", table_name)
                await self._sleep(delay)
        except Exception as error:
            self.logger.error(f"Chunk {index} on table {table_name} failed after {attempt} attempts: {error}")
            return SettledResult.rejected(index, len(chunk), attempt, error)

    async def _submit(
        self,
        table_name: str,
        kind: OperationKind,
        index: int,
        attempt: int,
        pending: List[AnyOperation],
    ) -> BatchWriteResult:
        doing, _, preposition = _WORDING[kind]
        self.logger.debug(
            f"{doing} {len(pending)} items {preposition} table {table_name} (chunk {index}, attempt {attempt})..."
        )
        try:
            return await self.store.batch_write(table_name, pending)
        except WrappedDynamoDBError as e:
            raise e.add_context(operation_kind=kind.value, chunk=index, attempt=attempt)
        except Exception as e:
            raise BackendError(
                f"BatchWriteItem on {table_name} failed: {e}",
                table_name=table_name,
                operation="BatchWriteItem",
                original_error=e,
                context={'operation_kind': kind.value, 'chunk': index, 'attempt': attempt},
            ) from e
