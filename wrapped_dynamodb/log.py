"""
Logging capability for the wrapped client.

Components take the logger they write to as a constructor argument. Anything
exposing ``debug``, ``info`` and ``error`` qualifies (a ``logging.Logger``, a
``LoggerAdapter``, a structlog bound logger...). When none is given the
component's module logger is used.
"""

import logging
from typing import Any, Optional, Protocol, runtime_checkable

import boto3

from .exceptions import InvalidArgumentError

REQUIRED_LEVELS = ('info', 'error', 'debug')

# Loggers boto3 routes wire-level diagnostics through
INTERNAL_LOGGERS = ('boto3', 'botocore')


@runtime_checkable
class SupportsLogging(Protocol):
    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> Any: ...

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> Any: ...


def resolve_logger(logger: Optional[Any], default: logging.Logger) -> SupportsLogging:
    """Return ``logger`` if it is usable, ``default`` if it is None.

    Raises:
        InvalidArgumentError: logger lacks one of the info/error/debug methods
    """
    if logger is None:
        return default
    missing = [level for level in REQUIRED_LEVELS if not callable(getattr(logger, level, None))]
    if missing:
        default.error(f"logger is missing {', '.join(missing)}")
        raise InvalidArgumentError('logger', logger, "logger must have info, error & debug methods")
    return logger


def warn(logger: SupportsLogging, message: str) -> None:
    """Log at warning level, falling back to info for loggers without one."""
    log_warning = getattr(logger, 'warning', None)
    if callable(log_warning):
        log_warning(message)
    else:
        logger.info(message)


def enable_internal_logging(level: int = logging.DEBUG) -> None:
    """Stream boto3/botocore internals (requests, retries, endpoints) to stderr."""
    for name in INTERNAL_LOGGERS:
        boto3.set_stream_logger(name, level)
