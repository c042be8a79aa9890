"""
Test helpers for the wrapped DynamoDB client.

InMemoryStore implements the StoreClient capability over a dict so the bulk
algorithms can be exercised without boto3: it applies batch writes, can be told
to bounce a number of operations back as unprocessed, and serves scan pages
with DynamoDB's Limit/LastEvaluatedKey semantics.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from wrapped_dynamodb.models import BatchWriteResult, Operation, OperationKind, Page

TABLE_NAME = "entities"

TABLE_OPTIONS = {
    'AttributeDefinitions': [
        {'AttributeName': 'entityPK', 'AttributeType': 'S'},
        {'AttributeName': 'entitySK', 'AttributeType': 'N'},
    ],
    'BillingMode': 'PAY_PER_REQUEST',
    'KeySchema': [
        {'AttributeName': 'entityPK', 'KeyType': 'HASH'},
        {'AttributeName': 'entitySK', 'KeyType': 'RANGE'},
    ],
}


class InMemoryStore:
    """StoreClient backed by a dict keyed on the tuple of key attribute values."""

    def __init__(
        self,
        key_names: Sequence[str],
        items: Sequence[Dict[str, Any]] = (),
        page_size: Optional[int] = None,
        bounce: Sequence[int] = (),
    ):
        """
        Args:
            key_names: Primary key attribute names
            items: Initial table contents
            page_size: Default scan page size when no Limit is passed
            bounce: Per batch_write call, how many trailing operations to return unprocessed
        """
        self.key_names = list(key_names)
        self.items: Dict[Tuple, Dict[str, Any]] = {self._key(item): dict(item) for item in items}
        self.page_size = page_size
        self.bounce = list(bounce)
        self.write_calls: List[List[Operation]] = []
        self.read_calls: List[Tuple[Optional[Dict[str, Any]], Dict[str, Any]]] = []

    def _key(self, item: Dict[str, Any]) -> Tuple:
        return tuple(item[name] for name in self.key_names)

    async def batch_write(self, table_name: str, operations: Sequence[Operation]) -> BatchWriteResult:
        operations = list(operations)
        self.write_calls.append(operations)

        bounced = self.bounce.pop(0) if self.bounce else 0
        applied = operations[:len(operations) - bounced]
        unprocessed = operations[len(operations) - bounced:]

        for operation in applied:
            if operation.kind is OperationKind.PUT:
                self.items[self._key(operation.payload)] = dict(operation.payload)
            else:
                self.items.pop(self._key(operation.payload), None)

        return BatchWriteResult(
            unprocessed=unprocessed,
            response={'UnprocessedItems': {table_name: [op.to_request() for op in unprocessed]} if unprocessed else {}},
        )

    async def read_page(self, table_name: str, cursor: Optional[Any] = None, **options: Any) -> Page:
        self.read_calls.append((cursor, options))

        limit = options.get('Limit', self.page_size)
        keys = sorted(self.items)
        if cursor is not None:
            start = self._key(cursor)
            keys = [key for key in keys if key > start]
        page_keys = keys[:limit] if limit else keys

        items = [dict(self.items[key]) for key in page_keys]
        next_cursor = None
        if limit and len(page_keys) == limit:
            next_cursor = dict(zip(self.key_names, page_keys[-1]))
        return Page(items=items, next_cursor=next_cursor, response={'Items': items, 'Count': len(items)})


def make_items(count: int, partition: str = "pk-1", **extra: Any) -> List[Dict[str, Any]]:
    """Items with a composite (entityPK, entitySK) key."""
    return [{'entityPK': partition, 'entitySK': index, **extra} for index in range(count)]
