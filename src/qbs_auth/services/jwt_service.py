"""JWT token service.

Provides creation, verification and revocation of the signed tokens used
for sessions, email verification, password reset and OAuth state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from qbs_auth.exceptions import (
    MalformedTokenError,
    TokenExpiredError,
    TokenRevokedError,
    WrongTokenTypeError,
)
from qbs_auth.revocation import InMemoryRevocationStore, RevocationStore
from qbs_auth.schemas import TokenPayload, TokenType

logger = logging.getLogger(__name__)


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived), refresh tokens (long-lived) and
    single-purpose tokens for email verification, password reset and the
    OAuth state round-trip. Revocation is keyed by the ``jti`` claim.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.create_access_token(user_id, "user@example.com")
    >>> payload = await service.verify_access_token(token)
    >>> print(payload.user_id)
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    DEFAULT_EMAIL_VERIFICATION_EXPIRE_HOURS = 24
    DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES = 60
    OAUTH_STATE_EXPIRE_MINUTES = 10
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
        email_verification_expire_hours: int = DEFAULT_EMAIL_VERIFICATION_EXPIRE_HOURS,
        password_reset_expire_minutes: int = DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES,
        revocation_store: RevocationStore | None = None,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        access_token_expire_minutes
            Minutes until access token expires (default 15)
        refresh_token_expire_days
            Days until refresh token expires (default 7)
        email_verification_expire_hours
            Hours until an email verification token expires (default 24)
        password_reset_expire_minutes
            Minutes until a password reset token expires (default 60)
        revocation_store
            Where revoked token ids live (default: a private in-memory store)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)
        self._verification_expire = timedelta(hours=email_verification_expire_hours)
        self._reset_expire = timedelta(minutes=password_reset_expire_minutes)
        self._revocation_store = (
            revocation_store if revocation_store is not None else InMemoryRevocationStore()
        )

    @property
    def access_token_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self._access_expire.total_seconds())

    @property
    def revocation_store(self) -> RevocationStore:
        return self._revocation_store

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        email
            The user's email address
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            token_type=TokenType.ACCESS,
            expires_delta=expires_delta or self._access_expire,
            user_id=user_id,
            email=email,
        )

    def create_refresh_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens are only accepted by the refresh endpoint to mint
        new access tokens.
        """
        return self._create_token(
            token_type=TokenType.REFRESH,
            expires_delta=expires_delta or self._refresh_expire,
            user_id=user_id,
            email=email,
        )

    def create_email_verification_token(
        self,
        user_id: UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        return self._create_token(
            token_type=TokenType.EMAIL_VERIFICATION,
            expires_delta=expires_delta or self._verification_expire,
            user_id=user_id,
            email=email,
        )

    def create_password_reset_token(
        self,
        user_id: UUID,
        email: str,
        token_version: int,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a single-purpose password reset token.

        The token embeds the user's current token version; bumping the
        version on the user invalidates every reset token issued before.
        """
        return self._create_token(
            token_type=TokenType.PASSWORD_RESET,
            expires_delta=expires_delta or self._reset_expire,
            user_id=user_id,
            email=email,
            extra_claims={"ver": token_version},
        )

    def create_oauth_state_token(self) -> str:
        return self._create_token(
            token_type=TokenType.OAUTH_STATE,
            expires_delta=timedelta(minutes=self.OAUTH_STATE_EXPIRE_MINUTES),
        )

    def verify_token(
        self,
        token: str,
        expected_type: TokenType | None = None,
    ) -> TokenPayload:
        """Verify and decode a JWT token.

        Checks signature, expiry and (optionally) the token type. The
        revocation set is not consulted here; see verify_access_token.

        Parameters
        ----------
        token
            The JWT token string to verify
        expected_type
            Reject tokens issued for any other purpose

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        TokenExpiredError
            If the token is past its expiry
        MalformedTokenError
            If the token is not a valid signed token
        WrongTokenTypeError
            If the token was issued for a different purpose
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "iat", "jti", "type"]},
            )

            subject = payload.get("sub")
            decoded = TokenPayload(
                user_id=UUID(subject) if subject else None,
                email=payload.get("email"),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_type=TokenType(payload["type"]),
                jti=str(payload["jti"]),
                token_version=payload.get("ver"),
            )

        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedTokenError(f"Malformed token payload: {e}") from e

        if expected_type is not None and decoded.token_type != expected_type:
            raise WrongTokenTypeError
        return decoded

    async def verify_access_token(self, token: str) -> TokenPayload:
        """Verify an access token, including the revocation set.

        Raises
        ------
        TokenRevokedError
            If the token was revoked before its natural expiry
        """
        payload = self.verify_token(token, expected_type=TokenType.ACCESS)
        if await self._revocation_store.contains(payload.jti):
            raise TokenRevokedError
        return payload

    async def verify_refresh_token(self, token: str) -> TokenPayload:
        payload = self.verify_token(token, expected_type=TokenType.REFRESH)
        if await self._revocation_store.contains(payload.jti):
            raise TokenRevokedError
        return payload

    def verify_email_verification_token(self, token: str) -> TokenPayload:
        return self.verify_token(token, expected_type=TokenType.EMAIL_VERIFICATION)

    def verify_password_reset_token(self, token: str) -> TokenPayload:
        return self.verify_token(token, expected_type=TokenType.PASSWORD_RESET)

    def verify_oauth_state_token(self, token: str) -> TokenPayload:
        return self.verify_token(token, expected_type=TokenType.OAUTH_STATE)

    async def revoke(self, token: str) -> None:
        """Revoke a token until its natural expiry. Idempotent.

        Tokens that are already expired or cannot be decoded need no
        revocation and are ignored.
        """
        try:
            payload = self.verify_token(token)
        except (TokenExpiredError, MalformedTokenError):
            return
        await self._revocation_store.add(payload.jti, payload.remaining_seconds() + 1)
        logger.debug("Token revoked (type=%s)", payload.token_type.value)

    async def is_revoked(self, token: str) -> bool:
        payload = self.verify_token(token)
        return await self._revocation_store.contains(payload.jti)

    def _create_token(
        self,
        token_type: TokenType,
        expires_delta: timedelta,
        user_id: UUID | None = None,
        email: str | None = None,
        extra_claims: dict | None = None,
    ) -> str:
        """Create a JWT token with the given parameters.

        Parameters
        ----------
        token_type
            Purpose of the token (``type`` claim)
        expires_delta
            Time until token expires
        user_id
            The user's unique identifier (``sub`` claim)
        email
            The user's email address
        extra_claims
            Additional claims merged into the payload

        Returns
        -------
        The encoded JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        expire = now + expires_delta

        payload: dict = {
            "type": token_type.value,
            "jti": uuid4().hex,
            "iat": now,
            "exp": expire,
        }
        if user_id is not None:
            payload["sub"] = str(user_id)
        if email is not None:
            payload["email"] = email
        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
