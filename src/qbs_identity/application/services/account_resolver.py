"""Resolve credentials or a Google profile to exactly one user account."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from qbs_auth import (
    EmailNotVerifiedError,
    InvalidCredentialsError,
    PasswordHashingService,
    WrongAuthMethodError,
)
from qbs_identity.domain.user import (
    EmailAlreadyExistsError,
    GoogleAccountAlreadyLinkedError,
    User,
    normalize_email,
)
from qbs_identity.infrastructure.oauth import GoogleProfile, OAuthError
from qbs_identity.validation.rules import NAME_MAX_LENGTH, strip_markup

if TYPE_CHECKING:
    from qbs_identity.domain.user import UserRepository
    from qbs_identity.validation import RegistrationInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAccount:
    """Outcome of a Google sign-in: the account and how it was reached."""

    user: User
    is_new: bool
    linked: bool = False


class AccountResolver:
    """
    Map an authentication attempt to a single account.

    Password logins go through ``authenticate``; Google sign-ins go
    through ``resolve_google`` which looks up by Google id first, then by
    email (linking the Google identity), and only then creates an
    OAuth-only account.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        require_email_verification: bool = True,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._require_email_verification = require_email_verification

    async def authenticate(self, email: str, password: str) -> User:
        """Check a password login and record it.

        Parameters
        ----------
        email
            Address as typed by the user; normalized before lookup.
        password
            Plaintext password.

        Returns
        -------
        User
            The authenticated user, with ``last_login_at`` updated.

        Raises
        ------
        InvalidCredentialsError
            Unknown email or wrong password (indistinguishable).
        WrongAuthMethodError
            The account only signs in with Google.
        EmailNotVerifiedError
            Correct password but the address is not verified yet.
        """
        user = await self._user_repo.find_by_email(normalize_email(email))
        if user is None:
            await self._password_service.burn_verification_time(password)
            raise InvalidCredentialsError

        if not user.has_usable_password:
            raise WrongAuthMethodError

        if not await self._password_service.verify_async(password, user.password_hash):
            raise InvalidCredentialsError

        if self._require_email_verification and not user.is_email_verified:
            raise EmailNotVerifiedError

        user.record_login()
        await self._user_repo.save(user)
        logger.info("User logged in: %s", user.id)
        return user

    async def register(self, data: RegistrationInput) -> User:
        if await self._user_repo.exists_by_email(data.email):
            raise EmailAlreadyExistsError(data.email)

        password_hash = await self._password_service.hash_async(data.password)
        user = User.register(
            email=data.email,
            password_hash=password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            country=data.country,
        )
        # A concurrent registration for the same address fails here on the
        # unique index and surfaces as EmailAlreadyExistsError.
        await self._user_repo.save(user)
        logger.info("User registered: %s", user.id)
        return user

    async def resolve_google(self, profile: GoogleProfile) -> ResolvedAccount:
        """Find, link or create the account for a Google profile."""
        user = await self._user_repo.find_by_google_id(profile.google_id)
        if user is not None:
            user.record_login()
            await self._user_repo.save(user)
            return ResolvedAccount(user=user, is_new=False)

        email = normalize_email(profile.email)
        user = await self._user_repo.find_by_email(email)
        if user is not None:
            if not profile.email_verified:
                msg = "Google account email is not verified"
                raise OAuthError(msg)
            if user.google_id is not None and user.google_id != profile.google_id:
                raise GoogleAccountAlreadyLinkedError(profile.google_id)
            user.link_google(profile.google_id)
            await self._user_repo.save(user)
            logger.info("Linked Google account to user: %s", user.id)
            return ResolvedAccount(user=user, is_new=False, linked=True)

        first_name, last_name = _names_from_profile(profile)
        user = User.create_from_google(
            email=email,
            google_id=profile.google_id,
            first_name=first_name,
            last_name=last_name,
        )
        await self._user_repo.save(user)
        logger.info("Created account from Google sign-in: %s", user.id)
        return ResolvedAccount(user=user, is_new=True)


def _names_from_profile(profile: GoogleProfile) -> tuple[str, str]:
    first = _clean_name(profile.given_name) or _clean_name(profile.display_name)
    if not first:
        first = profile.email.split("@", 1)[0][:NAME_MAX_LENGTH]
    return first, _clean_name(profile.family_name)


def _clean_name(value: str) -> str:
    return strip_markup(value).strip()[:NAME_MAX_LENGTH]
