"""Centralized exception handlers for the FastAPI application.

Domain exceptions are mapped to HTTP responses in one place so routers
can let them propagate.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE",
        "errors": [{"field": "...", "message": "..."}]   # validation only
    }

Usage:
    from qbs.presentation.api.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app, debug=settings.debug)
"""

import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

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
from qbs_identity.validation import field_errors_from

logger = logging.getLogger(__name__)


# =============================================================================
# Error Code to HTTP Status Mapping
# =============================================================================

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    # 400 Bad Request - validation errors
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_VERIFIED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_VERIFICATION_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_RESET_TOKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CONFIRMATION_REQUIRED: status.HTTP_400_BAD_REQUEST,
    # 401 Unauthorized - authentication errors
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.WRONG_AUTH_METHOD: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NO_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.TOKEN_REVOKED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.MALFORMED_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN_TYPE: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.REFRESH_TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    # 403 Forbidden
    ErrorCode.EMAIL_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    # 404 Not Found
    ErrorCode.ENTITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # 409 Conflict - already exists
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.EMAIL_EXISTS: status.HTTP_409_CONFLICT,
    # 500 - provider/account errors during OAuth
    ErrorCode.OAUTH_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    # 503 Service Unavailable - external service errors
    ErrorCode.OAUTH_NOT_CONFIGURED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    # 500 Internal Server Error
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _get_status_for_exception(exc: DomainException) -> int:  # NOQA: PLR0911
    """Determine HTTP status code for a domain exception.

    Uses the error code mapping, with fallback based on exception type.
    """
    if exc.code in ERROR_CODE_TO_STATUS:
        return ERROR_CODE_TO_STATUS[exc.code]

    if isinstance(exc, EntityNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, ServiceUnavailableError):
        return status.HTTP_503_SERVICE_UNAVAILABLE

    return status.HTTP_400_BAD_REQUEST


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: dict[str, Any] = {"detail": message, "code": code}
    if errors:
        content["errors"] = [error.to_dict() for error in errors]
    if extra:
        content.update(extra)

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def setup_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register all exception handlers on the FastAPI application.

    Parameters
    ----------
    app
        The FastAPI application instance
    debug
        Include the original message of unexpected errors in the response
    """

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle all domain exceptions with structured response.

        Logs the exception for debugging while returning a safe,
        user-friendly message to the client.
        """
        status_code = _get_status_for_exception(exc)

        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Domain exception on %s %s: %s (code=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
        )

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=exc.code.value,
            errors=exc.errors if isinstance(exc, ValidationError) else None,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = field_errors_from(exc.errors(), skip_loc_prefix=("body",))
        logger.info(
            "Rejected input on %s %s: %s",
            request.method,
            request.url.path,
            ", ".join(error.field for error in errors),
        )
        return _create_error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="Validation failed",
            code=ErrorCode.VALIDATION_ERROR.value,
            errors=errors,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unhandled exceptions with consistent error format.

        The error id is logged with the traceback so a report from a
        client can be matched to the server log.
        """
        error_id = uuid.uuid4().hex
        logger.exception(
            "Unhandled exception [%s] on %s %s: %s",
            error_id,
            request.method,
            request.url.path,
            exc,
        )
        extra: dict[str, Any] = {"error_id": error_id}
        if debug:
            extra["message"] = str(exc)
        return _create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="An internal error occurred",
            code=ErrorCode.INTERNAL_ERROR.value,
            extra=extra,
        )
