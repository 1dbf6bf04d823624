"""User domain exceptions."""

from qbs.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorCode.INVALID_EMAIL)


class EmailAlreadyExistsError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "An account with this email already exists",
            ErrorCode.EMAIL_EXISTS,
            details={"email": email},
        )


class GoogleAccountAlreadyLinkedError(ConflictError):
    """A Google identity is already attached to a different account."""

    def __init__(self, google_id: str) -> None:
        self.google_id = google_id
        super().__init__(
            "This Google account is already linked to another user",
            details={"google_id": google_id},
        )


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "User not found",
            ErrorCode.USER_NOT_FOUND,
            details={"user_id": user_id},
        )


class EmailAlreadyVerifiedError(ValidationError):
    """Email verification was attempted for an already verified account."""

    def __init__(self) -> None:
        super().__init__("Email is already verified", ErrorCode.ALREADY_VERIFIED)
