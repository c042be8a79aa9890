"""
Store responses and settled chunk outcomes.

These models are what flows between the store client and the bulk
algorithms: one BatchWriteResult per BatchWriteItem call, one Page per
Scan call, and one SettledResult per chunk of a reconcile call.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .operations import AnyOperation


class BatchWriteResult(BaseModel):
    """Outcome of a single BatchWriteItem attempt."""

    unprocessed: List[AnyOperation] = Field(default_factory=list,
                                            description="Operations the store did not apply in this attempt")
    response: Dict[str, Any] = Field(default_factory=dict, description="Raw store response")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Page(BaseModel):
    """One page of a paginated read."""

    items: List[Dict[str, Any]] = Field(default_factory=list)
    next_cursor: Optional[Any] = Field(None, description="Opaque continuation cursor (LastEvaluatedKey)")
    response: Dict[str, Any] = Field(default_factory=dict, description="Raw store response")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def is_last(self) -> bool:
        return self.next_cursor is None


class SettledStatus(str, Enum):
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class SettledResult(BaseModel):
    """
    Final outcome of one chunk of a bulk write.

    A fulfilled result holds the store response of the attempt that left no
    unprocessed items; a rejected result holds the error that ended the chunk.
    One chunk failing never affects the outcome of its siblings.
    """

    status: SettledStatus
    chunk_index: int = Field(..., ge=0)
    operation_count: int = Field(..., ge=0)
    attempts: int = Field(0, ge=0, description="Store calls issued for this chunk")
    response: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @classmethod
    def fulfilled(cls, chunk_index: int, operation_count: int, attempts: int,
                  response: Dict[str, Any]) -> "SettledResult":
        return cls(status=SettledStatus.FULFILLED, chunk_index=chunk_index,
                   operation_count=operation_count, attempts=attempts, response=response)

    @classmethod
    def rejected(cls, chunk_index: int, operation_count: int, attempts: int,
                 error: Exception) -> "SettledResult":
        return cls(status=SettledStatus.REJECTED, chunk_index=chunk_index,
                   operation_count=operation_count, attempts=attempts, error=error)

    @property
    def ok(self) -> bool:
        return self.status is SettledStatus.FULFILLED

    @property
    def value(self) -> Any:
        """Response when fulfilled, error when rejected."""
        return self.response if self.ok else self.error


def first_failure(results: Sequence[SettledResult]) -> Optional[Exception]:
    """Return the error of the lowest-index rejected chunk, or None."""
    for result in sorted(results, key=lambda r: r.chunk_index):
        if not result.ok:
            return result.error
    return None
