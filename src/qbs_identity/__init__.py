"""QBS Identity - user accounts, sign-in flows and account linking.

This package handles all identity-related concerns:
- User aggregate and persistence
- Input sanitization for every auth operation
- Registration, login, logout and token refresh
- Email verification and password reset
- Google sign-in with account linking by email

Token mechanics and password hashing live in qbs_auth.
"""

from qbs_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    EmailAlreadyVerifiedError,
    GoogleAccountAlreadyLinkedError,
    InvalidEmailError,
    User,
    UserNotFoundError,
    UserRepository,
)
from qbs_identity.exceptions import (
    AccountDeletionNotConfirmedError,
    InvalidResetTokenError,
    InvalidVerificationTokenError,
    OAuthNotConfiguredError,
)
from qbs_identity.validation import parse_input
from qbs_identity.application.context import UserContext
from qbs_identity.application.services import (
    AccountResolver,
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    ProfileService,
)

__all__ = [
    # Domain - User
    "Email",
    "EmailAlreadyExistsError",
    "EmailAlreadyVerifiedError",
    "GoogleAccountAlreadyLinkedError",
    "InvalidEmailError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    # Exceptions
    "AccountDeletionNotConfirmedError",
    "InvalidResetTokenError",
    "InvalidVerificationTokenError",
    "OAuthNotConfiguredError",
    # Validation
    "parse_input",
    # Application Context
    "UserContext",
    # Application Services
    "AccountResolver",
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
    "ProfileService",
]
