"""Authentication service: the single entry point for sign-in flows."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from qbs.domain.shared.exceptions import ConflictError, FieldError, ValidationError
from qbs_auth import (
    InvalidTokenError,
    JWTService,
    RefreshTokenExpiredError,
    TokenExpiredError,
    TokenType,
)
from qbs_identity.domain.user import User
from qbs_identity.exceptions import OAuthNotConfiguredError
from qbs_identity.infrastructure.oauth import OAuthError
from qbs_identity.validation.rules import check_email_domain

if TYPE_CHECKING:
    from qbs_identity.application.context import UserContext
    from qbs_identity.application.services.account_resolver import AccountResolver
    from qbs_identity.application.services.email_verification_service import (
        EmailVerificationService,
    )
    from qbs_identity.domain.user import UserRepository
    from qbs_identity.infrastructure.oauth import GoogleOAuthClient
    from qbs_identity.validation import LoginInput, RegistrationInput

logger = logging.getLogger(__name__)

REDIRECT_ONBOARDING = "onboarding"
REDIRECT_DASHBOARD = "dashboard"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


@dataclass(frozen=True)
class RegistrationResult:
    user: User
    email_verification_required: bool
    tokens: TokenPair | None = None
    redirect_to: str = REDIRECT_ONBOARDING


@dataclass(frozen=True)
class LoginResult:
    user: User
    tokens: TokenPair


@dataclass(frozen=True)
class RefreshResult:
    access_token: str
    expires_in: int
    refresh_token: str | None = None
    token_type: str = "bearer"


@dataclass(frozen=True)
class OAuthLoginResult:
    user: User
    tokens: TokenPair
    is_new_user: bool
    linked: bool = False

    @property
    def redirect_to(self) -> str:
        return REDIRECT_ONBOARDING if self.is_new_user else REDIRECT_DASHBOARD


class AuthenticationService:
    """
    Application service for user authentication.

    Composes the account resolver, JWT service and email verification
    into the operations exposed over HTTP:
    - Registration (with welcome/verification email)
    - Login with password
    - Logout (token revocation)
    - Access token refresh
    - Google sign-in

    Inputs arrive already sanitized (see ``qbs_identity.validation``).
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        account_resolver: AccountResolver,
        jwt_service: JWTService,
        email_verification_service: EmailVerificationService,
        google_client: GoogleOAuthClient | None = None,
        blocked_email_domains: Iterable[str] = (),
        require_email_verification: bool = True,
        auto_login: bool = False,
        rotate_refresh_tokens: bool = False,
    ):
        self._user_repo = user_repository
        self._resolver = account_resolver
        self._jwt_service = jwt_service
        self._verification = email_verification_service
        self._google_client = google_client
        self._blocked_email_domains = tuple(blocked_email_domains)
        self._require_email_verification = require_email_verification
        self._auto_login = auto_login
        self._rotate_refresh_tokens = rotate_refresh_tokens

    def _create_token_pair(self, user: User) -> TokenPair:
        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
        )
        refresh_token = self._jwt_service.create_refresh_token(
            user_id=user.id,
            email=user.email,
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._jwt_service.access_token_expires_in,
        )

    async def register(self, data: RegistrationInput) -> RegistrationResult:
        try:
            check_email_domain(data.email, self._blocked_email_domains)
        except ValueError as e:
            raise ValidationError(errors=[FieldError("email", str(e))]) from e

        user = await self._resolver.register(data)
        await self._verification.issue(user, welcome=True)

        tokens = self._create_token_pair(user) if self._auto_login else None
        return RegistrationResult(
            user=user,
            email_verification_required=self._require_email_verification,
            tokens=tokens,
        )

    async def login(self, data: LoginInput) -> LoginResult:
        user = await self._resolver.authenticate(data.email, data.password)
        return LoginResult(user=user, tokens=self._create_token_pair(user))

    async def logout(self, context: UserContext, refresh_token: str | None = None) -> None:
        """Revoke the presented access token and, optionally, a refresh token.

        A refresh token that does not verify or belongs to someone else is
        ignored; logout itself never fails on it.
        """
        await self._jwt_service.revoke(context.access_token)

        if refresh_token:
            try:
                payload = self._jwt_service.verify_token(
                    refresh_token,
                    expected_type=TokenType.REFRESH,
                )
            except InvalidTokenError:
                logger.debug("Ignoring unusable refresh token on logout")
            else:
                if payload.user_id == context.user_id:
                    await self._jwt_service.revoke(refresh_token)

        logger.info("User logged out: %s", context.user_id)

    async def refresh(self, refresh_token: str) -> RefreshResult:
        """Exchange a refresh token for a new access token.

        Raises
        ------
        RefreshTokenExpiredError
            The refresh token is past its expiry
        InvalidTokenError
            Malformed, revoked, wrong type, or the user no longer exists
        """
        try:
            payload = await self._jwt_service.verify_refresh_token(refresh_token)
        except TokenExpiredError as e:
            raise RefreshTokenExpiredError from e

        user = None
        if payload.user_id is not None:
            user = await self._user_repo.find_by_id(payload.user_id)
        if user is None:
            msg = "User no longer exists"
            raise InvalidTokenError(msg)

        access_token = self._jwt_service.create_access_token(
            user_id=user.id,
            email=user.email,
        )
        new_refresh_token = None
        if self._rotate_refresh_tokens:
            new_refresh_token = self._jwt_service.create_refresh_token(
                user_id=user.id,
                email=user.email,
            )
            await self._jwt_service.revoke(refresh_token)

        logger.debug("Access token refreshed for user: %s", user.id)
        return RefreshResult(
            access_token=access_token,
            expires_in=self._jwt_service.access_token_expires_in,
            refresh_token=new_refresh_token,
        )

    def google_authorization_url(self) -> str:
        client = self._require_google()
        return client.build_authorization_url(self._jwt_service.create_oauth_state_token())

    async def google_login(self, code: str, state: str) -> OAuthLoginResult:
        """Complete Google sign-in from the provider callback.

        Parameters
        ----------
        code
            Authorization code returned by Google
        state
            The signed state issued with the authorization URL

        Returns
        -------
        OAuthLoginResult with a token pair and whether the account is new

        Raises
        ------
        OAuthError
            Bad state, provider failure, or an account conflict
        """
        client = self._require_google()
        try:
            self._jwt_service.verify_oauth_state_token(state)
        except InvalidTokenError as e:
            msg = "Invalid OAuth state"
            raise OAuthError(msg) from e

        profile = await client.exchange_code(code)
        try:
            resolved = await self._resolver.resolve_google(profile)
        except ConflictError as e:
            # Linked elsewhere, or lost a first sign-in race on the unique index
            logger.warning("Google sign-in rejected: %s", e.code.value)
            msg = "This Google account cannot be used for sign-in"
            raise OAuthError(msg) from e
        return OAuthLoginResult(
            user=resolved.user,
            tokens=self._create_token_pair(resolved.user),
            is_new_user=resolved.is_new,
            linked=resolved.linked,
        )

    def _require_google(self) -> GoogleOAuthClient:
        if self._google_client is None:
            raise OAuthNotConfiguredError
        return self._google_client
