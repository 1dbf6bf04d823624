"""Identity application exceptions.

Raised by the qbs_identity application services; token problems on the
email and reset flows are input errors (400), not authentication errors.
"""

from qbs.domain.shared.exceptions import (
    ErrorCode,
    ServiceUnavailableError,
    ValidationError,
)


class InvalidVerificationTokenError(ValidationError):
    """Raised when an email verification token is invalid or expired."""

    def __init__(
        self,
        message: str = "Invalid verification token",
        code: ErrorCode = ErrorCode.INVALID_VERIFICATION_TOKEN,
    ):
        super().__init__(message, code)


class InvalidResetTokenError(ValidationError):
    """Raised when a password reset token is invalid or expired."""

    def __init__(
        self,
        message: str = "Invalid or expired password reset token",
        code: ErrorCode = ErrorCode.INVALID_RESET_TOKEN,
    ):
        super().__init__(message, code)


class AccountDeletionNotConfirmedError(ValidationError):
    """Raised when account deletion lacks the explicit confirmation phrase."""

    def __init__(
        self,
        message: str = "Account deletion requires confirmation. Send confirm_delete: 'DELETE_MY_ACCOUNT'",
    ):
        super().__init__(message, ErrorCode.CONFIRMATION_REQUIRED)


class OAuthNotConfiguredError(ServiceUnavailableError):
    """Raised when Google sign-in is used without client credentials."""

    def __init__(self, message: str = "Google sign-in is not configured"):
        super().__init__(message, ErrorCode.OAUTH_NOT_CONFIGURED)
