"""
Argument validation shared by the client facade and the bulk algorithms.

Every check logs the rejected value at error level and raises
InvalidArgumentError before any request is sent.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .exceptions import InvalidArgumentError
from .log import SupportsLogging
from .models import DeleteOperation, OperationKind, PutOperation


def validate_param(
    logger: SupportsLogging,
    name: str,
    value: Any,
    check: Callable[[Any], bool],
    reason: Optional[str] = None,
) -> bool:
    """Run ``check`` on ``value``; log and raise if it fails.

    Returns:
        True if valid

    Raises:
        InvalidArgumentError: check returned a falsy value
    """
    if not check(value):
        error = InvalidArgumentError(name, value, reason)
        logger.error(f"{error.message}: {value!r}")
        raise error
    return True


def validate_table_name(logger: SupportsLogging, table_name: Any) -> bool:
    return validate_param(
        logger, 'tableName', table_name,
        lambda v: isinstance(v, str) and len(v) > 0,
        "table name must be a non-empty string",
    )


def validate_item(logger: SupportsLogging, item: Any) -> bool:
    return validate_param(logger, 'item', item, lambda v: isinstance(v, Mapping), "item must be a mapping")


def validate_items(logger: SupportsLogging, items: Any) -> bool:
    return validate_param(
        logger, 'item array', items,
        lambda v: isinstance(v, Sequence) and not isinstance(v, (str, bytes)) and len(v) > 0
        and all(isinstance(item, Mapping) for item in v),
        "expected a non-empty list of mappings",
    )


def validate_key_schema(logger: SupportsLogging, key_schema: Any) -> bool:
    return validate_param(
        logger, 'KeySchema', key_schema,
        lambda v: isinstance(v, (list, tuple)) and 1 <= len(v) <= 2
        and all(isinstance(element, Mapping) and element.get('AttributeName') and element.get('KeyType')
                for element in v),
        "expected a partition key element and an optional sort key element",
    )


def validate_attribute_list(
    logger: SupportsLogging, attributes: Union[str, Sequence[str], None]
) -> Optional[List[str]]:
    """Validate and normalize a projection attribute list.

    Accepts None, a comma-delimited string or a sequence of names.

    Returns:
        List of attribute names, or None when no projection was requested
    """
    validate_param(
        logger, 'attribute list', attributes,
        lambda v: v is None or (isinstance(v, (str, list, tuple)) and len(v) > 0),
    )
    if attributes is None:
        return None
    if isinstance(attributes, str):
        return [name for name in re.split(r',\s*', attributes) if name]
    return list(attributes)


def validate_key_attribute_names(logger: SupportsLogging, names: Any) -> bool:
    return validate_param(
        logger, 'keys', names,
        lambda v: isinstance(v, (list, tuple)) and len(v) > 0
        and all(isinstance(name, str) and name for name in v),
        "expected a non-empty list of attribute names",
    )


def validate_operations(logger: SupportsLogging, operations: Any) -> OperationKind:
    """Validate a bulk operation list.

    Returns:
        The single kind shared by every operation

    Raises:
        InvalidArgumentError: list empty, contains non-operations, or mixes puts and deletes
    """
    validate_param(
        logger, 'operations', operations,
        lambda v: isinstance(v, Sequence) and len(v) > 0
        and all(isinstance(op, (PutOperation, DeleteOperation)) for op in v),
        "expected a non-empty list of put or delete operations",
    )
    kinds = {operation.kind for operation in operations}
    validate_param(
        logger, 'operations', operations,
        lambda v: len(kinds) == 1,
        "cannot mix put and delete operations in one call",
    )
    return kinds.pop()


def project_key(logger: SupportsLogging, item: Mapping[str, Any], key_names: Sequence[str]) -> Dict[str, Any]:
    """Reduce an item to its primary key attributes.

    Raises:
        InvalidArgumentError: item lacks one of the key attributes
    """
    missing = [name for name in key_names if name not in item]
    if missing:
        error = InvalidArgumentError('keys', list(key_names), f"item is missing key attributes {missing}")
        logger.error(f"{error.message}: {dict(item)!r}")
        raise error
    return {name: item[name] for name in key_names}
