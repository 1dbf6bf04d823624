"""Authentication services."""

from qbs_auth.services.jwt_service import JWTService
from qbs_auth.services.password_service import (
    OAUTH_ONLY_PASSWORD,
    PasswordHashingService,
)

__all__ = ["JWTService", "OAUTH_ONLY_PASSWORD", "PasswordHashingService"]
