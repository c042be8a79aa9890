"""
Helpers for shaping DynamoDB requests.

- Chunking operation lists to request-size limits
- Building ProjectionExpressions with ``#name`` placeholders
- Response status checks
"""

from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List, Sequence, TypeVar

T = TypeVar('T')


def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive lists of at most ``size`` items.

    Example:
        >>> list(chunked(range(5), 2))
        [[0, 1], [2, 3], [4]]
    """
    if size < 1:
        raise ValueError("size must be positive")
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def build_projection(attributes: Sequence[str]) -> Dict[str, Any]:
    """Build ProjectionExpression request parameters.

    Every attribute goes through an ExpressionAttributeNames placeholder so
    reserved words (``name``, ``status``...) can be projected.

    Example:
        >>> build_projection(['id', 'name'])
        {'ExpressionAttributeNames': {'#id': 'id', '#name': 'name'}, 'ProjectionExpression': '#id,#name'}
    """
    if not attributes:
        return {}
    return {
        'ExpressionAttributeNames': {f"#{attribute}": attribute for attribute in attributes},
        'ProjectionExpression': ",".join(f"#{attribute}" for attribute in attributes),
    }


def http_status(response: Dict[str, Any]) -> int:
    """HTTP status code recorded in a boto3 response, 0 if absent."""
    return response.get('ResponseMetadata', {}).get('HTTPStatusCode', 0)
