"""Email verification: issuing, delivering and consuming tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from qbs_auth import InvalidTokenError, JWTService, TokenExpiredError, WrongTokenTypeError
from qbs_identity.domain.user import EmailAlreadyVerifiedError, User, normalize_email
from qbs_identity.exceptions import InvalidVerificationTokenError

if TYPE_CHECKING:
    from qbs_identity.domain.user import UserRepository
    from qbs_identity.infrastructure.email import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PendingEmail:
    to_email: str
    name: str
    link: str
    welcome: bool


class EmailVerificationService:
    """Service for verifying account email addresses.

    The most recently issued token is stored on the user; only that one
    is accepted, so a resend supersedes earlier links. One instance serves
    one request: emails queued by ``issue`` wait for ``send_pending``.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        jwt_service: JWTService,
        notifier: Notifier,
        frontend_base_url: str,
    ):
        self._user_repo = user_repository
        self._jwt_service = jwt_service
        self._notifier = notifier
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._pending: list[_PendingEmail] = []

    def verification_link(self, token: str) -> str:
        return f"{self._frontend_base_url}/verify-email?token={token}"

    async def issue(self, user: User, welcome: bool = False) -> str:
        """Create a token for ``user`` and persist it.

        The email is only queued here. The caller commits the unit of work
        and then calls ``send_pending``, so no link goes out for an account
        or address that was never stored.
        """
        token = self._jwt_service.create_email_verification_token(
            user_id=user.id,
            email=user.email,
        )
        user.set_verification_token(token)
        await self._user_repo.save(user)

        self._pending.append(
            _PendingEmail(
                to_email=user.email,
                name=user.first_name,
                link=self.verification_link(token),
                welcome=welcome,
            ),
        )
        return token

    def send_pending(self) -> int:
        """Hand queued emails to the notifier. Returns how many were sent."""
        pending, self._pending = self._pending, []
        for email in pending:
            if email.welcome:
                self._notifier.send_welcome(email.to_email, email.name, email.link)
            else:
                self._notifier.send_verification(email.to_email, email.name, email.link)
        return len(pending)

    async def verify(self, token: str) -> User:
        """Consume a verification token and mark the address verified.

        Raises
        ------
        InvalidVerificationTokenError
            The token is malformed, expired, for another purpose, or no
            longer the current token of its user
        EmailAlreadyVerifiedError
            The address was verified before
        """
        try:
            payload = self._jwt_service.verify_email_verification_token(token)
        except TokenExpiredError as e:
            msg = "Verification token has expired"
            raise InvalidVerificationTokenError(msg) from e
        except WrongTokenTypeError as e:
            msg = "Invalid token purpose"
            raise InvalidVerificationTokenError(msg) from e
        except InvalidTokenError as e:
            raise InvalidVerificationTokenError from e

        user = None
        if payload.user_id is not None:
            user = await self._user_repo.find_by_id(payload.user_id)
        if user is None or user.email != payload.email:
            raise InvalidVerificationTokenError

        if user.is_email_verified:
            raise EmailAlreadyVerifiedError

        if user.verification_token != token:
            msg = "Verification token has been superseded"
            raise InvalidVerificationTokenError(msg)

        user.verify_email()
        await self._user_repo.save(user)
        logger.info("Email verified for user: %s", user.id)
        return user

    async def resend(self, email: str) -> None:
        # Silent for unknown and already verified addresses
        user = await self._user_repo.find_by_email(normalize_email(email))
        if user is None or user.is_email_verified:
            logger.debug("Verification resend skipped")
            return
        await self.issue(user)
        logger.info("Verification email re-issued for user: %s", user.id)
