"""FastAPI dependency injection for the QB Securiegnty API.

Long-lived collaborators (engine, session maker, JWT service with its
revocation store, notifier, Google client) are built once by
``create_app`` and kept on ``app.state``. These dependencies read them
from there and assemble the request-scoped services:
- Database sessions
- Authentication (current user from JWT)
- Service instances
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from qbs_auth import InvalidTokenError, JWTService, MissingTokenError, PasswordHashingService
from qbs_config.settings import Settings
from qbs_identity.application.context import UserContext
from qbs_identity.application.services import (
    AccountResolver,
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    ProfileService,
)
from qbs_identity.domain.user import User, UserRepository
from qbs_identity.infrastructure.email import Notifier
from qbs_identity.infrastructure.oauth import GoogleOAuthClient
from qbs_identity.infrastructure.persistence.sqlalchemy import UserRepositorySQLAlchemy

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Application-scoped collaborators
# -----------------------------------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_jwt_service(request: Request) -> JWTService:
    """Shared JWT service; it owns the process revocation store."""
    return request.app.state.jwt_service


def get_password_service(request: Request) -> PasswordHashingService:
    return request.app.state.password_service


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_google_client(request: Request) -> GoogleOAuthClient | None:
    return request.app.state.google_client


JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]
GoogleClientDep = Annotated[GoogleOAuthClient | None, Depends(get_google_client)]


# -----------------------------------------------------------------------------
# Database Session
# -----------------------------------------------------------------------------


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request using the shared engine/pool.
    Routers commit explicitly; anything uncommitted is rolled back when
    the session closes.

    Yields
    ------
    AsyncSession for database operations
    """
    async with request.app.state.session_maker() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_user_repository(session: DBSession, settings: SettingsDep) -> UserRepository:
    return UserRepositorySQLAlchemy(session, timeout=settings.db_timeout_seconds)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]


# -----------------------------------------------------------------------------
# Services
# -----------------------------------------------------------------------------


def get_email_verification_service(
    user_repo: UserRepo,
    jwt_service: JWTServiceDep,
    notifier: NotifierDep,
    settings: SettingsDep,
) -> EmailVerificationService:
    return EmailVerificationService(
        user_repository=user_repo,
        jwt_service=jwt_service,
        notifier=notifier,
        frontend_base_url=settings.frontend_base_url,
    )


VerificationService = Annotated[
    EmailVerificationService,
    Depends(get_email_verification_service),
]


def get_authentication_service(  # noqa: PLR0913
    user_repo: UserRepo,
    jwt_service: JWTServiceDep,
    password_service: PasswordServiceDep,
    verification_service: VerificationService,
    google_client: GoogleClientDep,
    settings: SettingsDep,
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, login, logout, token refresh
    and Google sign-in.
    """
    resolver = AccountResolver(
        user_repository=user_repo,
        password_service=password_service,
        require_email_verification=settings.require_email_verification,
    )
    return AuthenticationService(
        user_repository=user_repo,
        account_resolver=resolver,
        jwt_service=jwt_service,
        email_verification_service=verification_service,
        google_client=google_client,
        blocked_email_domains=settings.disposable_email_domains,
        require_email_verification=settings.require_email_verification,
        auto_login=settings.registration_auto_login,
        rotate_refresh_tokens=settings.jwt_rotate_refresh_tokens,
    )


# Type alias for injected auth service
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]


def get_password_reset_service(
    user_repo: UserRepo,
    password_service: PasswordServiceDep,
    jwt_service: JWTServiceDep,
    notifier: NotifierDep,
    settings: SettingsDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=user_repo,
        password_service=password_service,
        jwt_service=jwt_service,
        notifier=notifier,
        frontend_base_url=settings.frontend_base_url,
    )


ResetService = Annotated[PasswordResetService, Depends(get_password_reset_service)]


def get_profile_service(
    user_repo: UserRepo,
    verification_service: VerificationService,
    jwt_service: JWTServiceDep,
    settings: SettingsDep,
) -> ProfileService:
    return ProfileService(
        user_repository=user_repo,
        email_verification_service=verification_service,
        jwt_service=jwt_service,
        blocked_email_domains=settings.disposable_email_domains,
    )


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    request: Request,
    user_repo: UserRepo,
    jwt_service: JWTServiceDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    FastAPI dependency to get the current authenticated user from JWT.

    Verifies the bearer token (signature, expiry, type and revocation),
    then loads the corresponding User from the database.

    Returns
    -------
    The authenticated User

    Raises
    ------
    MissingTokenError
        No bearer token was sent
    InvalidTokenError
        Token invalid, expired, revoked, or its user no longer exists
    """
    if credentials is None:
        raise MissingTokenError

    token = credentials.credentials
    payload = await jwt_service.verify_access_token(token)

    user = None
    if payload.user_id is not None:
        user = await user_repo.find_by_id(payload.user_id)
    if user is None:
        logger.warning("User not found for token: %s", payload.user_id)
        msg = "User not found"
        raise InvalidTokenError(msg)

    request.state.access_token = token
    return user


# Type alias for injected current user
CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_user_context(request: Request, user: CurrentUser) -> UserContext:
    """UserContext carrying the presented access token for revocation."""
    return UserContext.create(user, access_token=request.state.access_token)


# Type alias for injected user context
CurrentUserContext = Annotated[UserContext, Depends(get_user_context)]
