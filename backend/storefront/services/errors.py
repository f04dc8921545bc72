"""
Service Errors

Every failure a service reports carries an ErrorKind, so callers branch on
the kind instead of on message text. The API maps kinds to HTTP status codes
in one place (see storefront.main).
"""
import enum
import logging
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"  # no authenticated user
    FORBIDDEN = "forbidden"  # authenticated, wrong role or not the owner
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"  # unique name/url/email/phone already taken
    VALIDATION = "validation"


class ServiceError(Exception):
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context
        self.operation: str | None = None

    def describe(self) -> str:
        """Message prefixed with the operation that failed, when known."""
        if self.operation:
            return f"Failed to {self.operation}: {self.message}"
        return self.message


class Unauthorized(ServiceError):
    kind = ErrorKind.UNAUTHORIZED


class Forbidden(ServiceError):
    kind = ErrorKind.FORBIDDEN


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT


class ValidationFailed(ServiceError):
    kind = ErrorKind.VALIDATION


def operation(name: str) -> Callable:
    """Tag errors raised by a service function with the operation name and log them."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError as e:
                if e.operation is None:
                    e.operation = name
                logger.error(f"Error trying to {name}: [{e.kind.value}] {e.message}")
                raise
        return wrapper
    return decorator
