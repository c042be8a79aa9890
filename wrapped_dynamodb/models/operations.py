"""
Bulk Write Operations

An operation is a single put or delete aimed at one item of one table. Bulk
APIs take a list of operations of the same kind, split them into chunks and
hand each chunk to the store as one BatchWriteItem request.

The payload (``item`` for puts, ``key`` for deletes) is a plain mapping of
attribute name to any value the boto3 resource layer can serialize: str,
Decimal/int, bytes, bool, None, lists, maps and sets.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from ..exceptions import InvalidArgumentError


class OperationKind(str, Enum):
    """Kind of a bulk write operation."""
    PUT = "put"
    DELETE = "delete"


class Operation(BaseModel):
    """Common base for put and delete operations."""

    kind: ClassVar[OperationKind]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_request(self) -> Dict[str, Any]:
        """Render as a BatchWriteItem write request."""
        raise NotImplementedError

    @staticmethod
    def from_request(request: Mapping[str, Any]) -> "Operation":
        """Rebuild an operation from a write request echoed back in UnprocessedItems."""
        if 'PutRequest' in request:
            return PutOperation(item=request['PutRequest']['Item'])
        if 'DeleteRequest' in request:
            return DeleteOperation(key=request['DeleteRequest']['Key'])
        raise InvalidArgumentError('write request', request, "expected PutRequest or DeleteRequest")


class PutOperation(Operation):
    """Put (insert or replace) a whole item."""

    kind: ClassVar[OperationKind] = OperationKind.PUT

    item: Dict[str, Any] = Field(..., description="Complete item to write")

    @property
    def payload(self) -> Dict[str, Any]:
        return self.item

    def to_request(self) -> Dict[str, Any]:
        return {'PutRequest': {'Item': self.item}}


class DeleteOperation(Operation):
    """Delete an item by primary key."""

    kind: ClassVar[OperationKind] = OperationKind.DELETE

    key: Dict[str, Any] = Field(..., description="Primary key attributes of the item")

    @property
    def payload(self) -> Dict[str, Any]:
        return self.key

    def to_request(self) -> Dict[str, Any]:
        return {'DeleteRequest': {'Key': self.key}}


AnyOperation = Union[PutOperation, DeleteOperation]


def build_operations(kind: OperationKind, payloads: Iterable[Mapping[str, Any]]) -> List[AnyOperation]:
    """Wrap plain item/key mappings into operations of one kind.

    Args:
        kind: Operation kind to build
        payloads: Items (for puts) or keys (for deletes)

    Returns:
        List of operations, in input order

    Raises:
        InvalidArgumentError: A payload is not a mapping
    """
    operations: List[AnyOperation] = []
    for payload in payloads:
        if not isinstance(payload, Mapping):
            raise InvalidArgumentError('item array', payload, "every entry must be a mapping")
        try:
            if kind is OperationKind.PUT:
                operations.append(PutOperation(item=dict(payload)))
            else:
                operations.append(DeleteOperation(key=dict(payload)))
        except PydanticValidationError as e:
            raise InvalidArgumentError('item array', payload, str(e)) from e
    return operations
