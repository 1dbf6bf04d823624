"""User domain: aggregate, value objects, repository interface, errors."""

from qbs_identity.domain.user.aggregates import User
from qbs_identity.domain.user.exceptions import (
    EmailAlreadyExistsError,
    EmailAlreadyVerifiedError,
    GoogleAccountAlreadyLinkedError,
    InvalidEmailError,
    UserNotFoundError,
)
from qbs_identity.domain.user.repositories import UserRepository
from qbs_identity.domain.user.value_objects import Email, normalize_email

__all__ = [
    "Email",
    "EmailAlreadyExistsError",
    "EmailAlreadyVerifiedError",
    "GoogleAccountAlreadyLinkedError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "normalize_email",
]
