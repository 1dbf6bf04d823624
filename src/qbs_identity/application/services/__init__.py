from qbs_identity.application.services.account_resolver import (
    AccountResolver,
    ResolvedAccount,
)
from qbs_identity.application.services.authentication_service import (
    AuthenticationService,
    LoginResult,
    OAuthLoginResult,
    RefreshResult,
    RegistrationResult,
    TokenPair,
)
from qbs_identity.application.services.email_verification_service import (
    EmailVerificationService,
)
from qbs_identity.application.services.password_reset_service import (
    PasswordResetService,
)
from qbs_identity.application.services.profile_service import (
    DELETE_CONFIRMATION,
    ProfileService,
    SecurityStatus,
)

__all__ = [
    "DELETE_CONFIRMATION",
    "AccountResolver",
    "AuthenticationService",
    "EmailVerificationService",
    "LoginResult",
    "OAuthLoginResult",
    "PasswordResetService",
    "ProfileService",
    "RefreshResult",
    "RegistrationResult",
    "ResolvedAccount",
    "SecurityStatus",
    "TokenPair",
]
