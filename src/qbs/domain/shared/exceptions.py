"""Shared domain exceptions and error codes.

This module defines the base exception hierarchy and error codes for the
whole backend. All domain exceptions inherit from DomainException so the
presentation layer can map them to HTTP responses in one place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    ALREADY_VERIFIED = "ALREADY_VERIFIED"
    INVALID_VERIFICATION_TOKEN = "INVALID_VERIFICATION_TOKEN"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"

    # Authentication Errors (401)
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    WRONG_AUTH_METHOD = "WRONG_AUTH_METHOD"
    NO_TOKEN = "NO_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_REVOKED = "TOKEN_REVOKED"
    MALFORMED_TOKEN = "MALFORMED_TOKEN"
    INVALID_TOKEN_TYPE = "INVALID_TOKEN_TYPE"
    REFRESH_TOKEN_EXPIRED = "REFRESH_TOKEN_EXPIRED"

    # Authorization Errors (403)
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"

    # Not Found Errors (404)
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Conflict Errors (409)
    CONFLICT = "CONFLICT"
    EMAIL_EXISTS = "EMAIL_EXISTS"

    # External dependencies
    OAUTH_FAILED = "OAUTH_FAILED"
    OAUTH_NOT_CONFIGURED = "OAUTH_NOT_CONFIGURED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # General Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class FieldError:
    """A single (field, message) validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    This exception provides structured error information that can be
    used by the presentation layer to generate consistent API responses.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(DomainException):
    """Raised when input validation fails.

    Carries the individual field failures so clients can highlight them.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
        errors: list[FieldError] | None = None,
    ) -> None:
        super().__init__(message, code, details)
        self.errors = errors or []


class EntityNotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENTITY_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ConflictError(DomainException):
    """Raised when an operation conflicts with existing state."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFLICT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class AuthenticationError(DomainException):
    """Raised when a caller cannot be authenticated (401)."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: ErrorCode = ErrorCode.INVALID_CREDENTIALS,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class AuthorizationError(DomainException):
    """Raised when an authenticated caller may not proceed (403)."""

    def __init__(
        self,
        message: str = "Access denied",
        code: ErrorCode = ErrorCode.EMAIL_NOT_VERIFIED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ServiceUnavailableError(DomainException):
    """Raised when a dependency (database, provider) cannot be reached."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable. Please try again later.",
        code: ErrorCode = ErrorCode.SERVICE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
