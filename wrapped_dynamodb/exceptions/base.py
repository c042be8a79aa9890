from typing import Any, Dict, Optional


class WrappedDynamoDBError(Exception):
    """Base exception for every error raised by the wrapped DynamoDB client.

    Attributes:
        message: Human-readable error message
        original_error: The exception that caused this error (if any)
        context: Where the failure happened (table name, operation, chunk, attempt...)
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            original_error: The exception that caused this error
            context: Additional context about the failing call
        """
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        super().__init__(message)

    def add_context(self, **context: Any) -> "WrappedDynamoDBError":
        """Record extra context without overwriting keys set closer to the failure.

        Returns:
            The same exception, so callers can ``raise error.add_context(...)``.
        """
        for key, value in context.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def __str__(self) -> str:
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, original_error={self.original_error!r}, context={self.context!r})"
