"""QBS Auth - token issuance, revocation and password hashing.

Generic authentication infrastructure used by qbs_identity:
- JWT access/refresh and single-purpose tokens
- Revocation stores (in-memory or Redis)
- bcrypt password hashing
"""

from qbs_auth.exceptions import (
    AuthError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidTokenError,
    MalformedTokenError,
    MissingTokenError,
    RefreshTokenExpiredError,
    TokenExpiredError,
    TokenRevokedError,
    WeakPasswordError,
    WrongAuthMethodError,
    WrongTokenTypeError,
)
from qbs_auth.revocation import (
    InMemoryRevocationStore,
    RedisRevocationStore,
    RevocationStore,
)
from qbs_auth.schemas import TokenPayload, TokenType
from qbs_auth.services import OAUTH_ONLY_PASSWORD, JWTService, PasswordHashingService

__all__ = [
    # Exceptions
    "AuthError",
    "EmailNotVerifiedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MalformedTokenError",
    "MissingTokenError",
    "RefreshTokenExpiredError",
    "TokenExpiredError",
    "TokenRevokedError",
    "WeakPasswordError",
    "WrongAuthMethodError",
    "WrongTokenTypeError",
    # Revocation
    "InMemoryRevocationStore",
    "RedisRevocationStore",
    "RevocationStore",
    # Schemas
    "TokenPayload",
    "TokenType",
    # Services
    "JWTService",
    "OAUTH_ONLY_PASSWORD",
    "PasswordHashingService",
]
