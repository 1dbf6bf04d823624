"""Shared domain building blocks."""

from qbs.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    FieldError,
    ServiceUnavailableError,
    ValidationError,
)
from qbs.domain.shared.time import utc_now

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainException",
    "EntityNotFoundError",
    "ErrorCode",
    "FieldError",
    "ServiceUnavailableError",
    "ValidationError",
    "utc_now",
]
