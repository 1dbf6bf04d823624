"""User aggregate for identity concerns only."""

from __future__ import annotations

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from qbs.domain.shared.time import utc_now
from qbs_auth.services.password_service import (
    OAUTH_ONLY_PASSWORD,
    PasswordHashingService,
)
from qbs_identity.domain.user.exceptions import EmailAlreadyVerifiedError
from qbs_identity.domain.user.value_objects.email import Email


class User:
    """
    User aggregate root.

    An account can sign in with a local password, a linked Google identity,
    or both. OAuth-only accounts carry a sentinel instead of a password hash.
    """

    def __init__(  # NOQA: PLR0913
        self,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str | None = None,
        google_id: str | None = None,
        country: str | None = None,
        is_email_verified: bool = False,
        verification_token: str | None = None,
        token_version: int = 0,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
        last_login_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._first_name = first_name
        self._last_name = last_name
        self._password_hash = password_hash
        self._google_id = google_id
        self._country = country
        self._is_email_verified = is_email_verified
        self._verification_token = verification_token
        self._token_version = token_version
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()
        self._last_login_at = last_login_at

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def country(self) -> str | None:
        return self._country

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def google_id(self) -> str | None:
        return self._google_id

    @property
    def is_email_verified(self) -> bool:
        return self._is_email_verified

    @property
    def verification_token(self) -> str | None:
        return self._verification_token

    @property
    def token_version(self) -> int:
        return self._token_version

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def last_login_at(self) -> datetime | None:
        return self._last_login_at

    @property
    def has_usable_password(self) -> bool:
        return PasswordHashingService.is_usable_hash(self._password_hash)

    @property
    def is_oauth_only(self) -> bool:
        return not self.has_usable_password and self._google_id is not None

    def record_login(self) -> None:
        now = utc_now()
        self._last_login_at = now
        self._updated_at = now

    def link_google(self, google_id: str) -> None:
        """Attach a Google identity; Google has verified the address."""
        self._google_id = google_id
        self._is_email_verified = True
        self._verification_token = None
        self.record_login()

    def set_verification_token(self, token: str) -> None:
        self._verification_token = token
        self._touch()

    def verify_email(self) -> None:
        if self._is_email_verified:
            raise EmailAlreadyVerifiedError
        self._is_email_verified = True
        self._verification_token = None
        self._touch()

    def change_password(self, password_hash: str) -> None:
        """Store a new hash and invalidate outstanding reset tokens."""
        self._password_hash = password_hash
        self._token_version += 1
        self._touch()

    def update_profile(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        email: Union[str, Email, None] = None,
        country: str | None = None,
    ) -> bool:
        """Apply profile changes.

        Returns True when the email changed; a new address must be
        verified again.
        """
        if first_name is not None:
            self._first_name = first_name
        if last_name is not None:
            self._last_name = last_name
        if country is not None:
            self._country = country

        email_changed = False
        if email is not None:
            new_email = email if isinstance(email, Email) else Email(email)
            if new_email != self._email:
                self._email = new_email
                self._is_email_verified = False
                self._verification_token = None
                email_changed = True

        self._touch()
        return email_changed

    def _touch(self) -> None:
        self._updated_at = utc_now()

    @classmethod
    def register(
        cls,
        email: Union[str, Email],
        password_hash: str,
        first_name: str,
        last_name: str,
        country: str | None = None,
    ) -> User:
        return cls(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            country=country,
        )

    @classmethod
    def create_from_google(
        cls,
        email: Union[str, Email],
        google_id: str,
        first_name: str,
        last_name: str,
    ) -> User:
        user = cls(
            email=email,
            password_hash=OAUTH_ONLY_PASSWORD,
            google_id=google_id,
            first_name=first_name,
            last_name=last_name,
            is_email_verified=True,
        )
        user.record_login()
        return user

    @classmethod
    def reconstitute(  # NOQA: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        first_name: str,
        last_name: str,
        password_hash: str | None,
        google_id: str | None,
        country: str | None,
        is_email_verified: bool,
        verification_token: str | None,
        token_version: int,
        created_at: datetime,
        updated_at: datetime,
        last_login_at: datetime | None,
    ) -> User:
        return cls(
            id=id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            google_id=google_id,
            country=country,
            is_email_verified=is_email_verified,
            verification_token=verification_token,
            token_version=token_version,
            created_at=created_at,
            updated_at=updated_at,
            last_login_at=last_login_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
