"""Authentication exceptions.

These exceptions are raised by the qbs_auth package. They extend the
shared domain taxonomy so the API maps them to 401/403 responses without
per-router translation.
"""

from qbs.domain.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ErrorCode,
    ValidationError,
)


class AuthError(AuthenticationError):
    """Base exception for all authentication errors."""

    def __init__(
        self,
        message: str = "Authentication error",
        code: ErrorCode = ErrorCode.INVALID_CREDENTIALS,
    ):
        super().__init__(message, code)


class InvalidCredentialsError(AuthError):
    """Raised when email or password is incorrect during login.

    The message is identical for unknown accounts and wrong passwords.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS)


class WrongAuthMethodError(AuthError):
    """Raised when a password login targets an OAuth-only account."""

    def __init__(
        self,
        message: str = "This account uses Google sign-in. Please continue with Google.",
    ):
        super().__init__(message, ErrorCode.WRONG_AUTH_METHOD)


class MissingTokenError(AuthError):
    """Raised when a protected operation is called without a token."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(message, ErrorCode.NO_TOKEN)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, revoked or malformed."""

    def __init__(
        self,
        message: str = "Invalid or expired token",
        code: ErrorCode = ErrorCode.MALFORMED_TOKEN,
    ):
        super().__init__(message, code)


class MalformedTokenError(InvalidTokenError):
    """Raised when a token cannot be decoded or its signature is wrong."""

    def __init__(self, message: str = "Invalid token format"):
        super().__init__(message, ErrorCode.MALFORMED_TOKEN)


class TokenExpiredError(InvalidTokenError):
    """Raised when a token is past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


class TokenRevokedError(InvalidTokenError):
    """Raised when a token was explicitly revoked (e.g. by logout)."""

    def __init__(self, message: str = "Token has been revoked"):
        super().__init__(message, ErrorCode.TOKEN_REVOKED)


class WrongTokenTypeError(InvalidTokenError):
    """Raised when a token is used for a purpose it was not issued for."""

    def __init__(self, message: str = "Invalid token type"):
        super().__init__(message, ErrorCode.INVALID_TOKEN_TYPE)


class RefreshTokenExpiredError(InvalidTokenError):
    """Raised when a refresh token has expired."""

    def __init__(self, message: str = "Refresh token has expired. Please login again."):
        super().__init__(message, ErrorCode.REFRESH_TOKEN_EXPIRED)


class EmailNotVerifiedError(AuthorizationError):
    """Raised when login is attempted before the email was verified."""

    def __init__(
        self,
        message: str = "Please verify your email address before logging in",
    ):
        super().__init__(message, ErrorCode.EMAIL_NOT_VERIFIED)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message, ErrorCode.WEAK_PASSWORD)
