"""Profile reads and updates for the signed-in user."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from qbs.domain.shared.exceptions import FieldError, ValidationError
from qbs.domain.shared.time import whole_days_since
from qbs_identity.domain.user import EmailAlreadyExistsError, User, UserNotFoundError
from qbs_identity.exceptions import AccountDeletionNotConfirmedError
from qbs_identity.validation.rules import check_email_domain

if TYPE_CHECKING:
    from qbs_auth import JWTService
    from qbs_identity.application.context import UserContext
    from qbs_identity.application.services.email_verification_service import (
        EmailVerificationService,
    )
    from qbs_identity.domain.user import UserRepository
    from qbs_identity.validation import ProfileUpdateInput

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "DELETE_MY_ACCOUNT"


@dataclass(frozen=True)
class SecurityStatus:
    email_verified: bool
    has_password: bool
    google_linked: bool
    account_age_days: int
    last_login_at: datetime | None
    last_update: datetime
    security_level: str
    recommendations: list[str] = field(default_factory=list)


class ProfileService:
    """Read, update and delete the current user's own account."""

    def __init__(
        self,
        user_repository: UserRepository,
        email_verification_service: EmailVerificationService,
        jwt_service: JWTService,
        blocked_email_domains: Iterable[str] = (),
    ):
        self._user_repo = user_repository
        self._verification = email_verification_service
        self._jwt_service = jwt_service
        self._blocked_email_domains = tuple(blocked_email_domains)

    async def get_profile(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def update_profile(
        self,
        user_id: UUID,
        data: ProfileUpdateInput,
    ) -> tuple[User, bool]:
        """Apply a partial update.

        Returns the updated user and whether the email changed. A changed
        address is unverified until the new verification link is used.
        """
        user = await self.get_profile(user_id)

        if data.email is not None and data.email != user.email:
            try:
                check_email_domain(data.email, self._blocked_email_domains)
            except ValueError as e:
                raise ValidationError(errors=[FieldError("email", str(e))]) from e
            if await self._user_repo.exists_by_email(data.email):
                raise EmailAlreadyExistsError(data.email)

        email_changed = user.update_profile(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            country=data.country,
        )
        await self._user_repo.save(user)

        if email_changed:
            await self._verification.issue(user)
            logger.info("Email changed for user %s; re-verification queued", user.id)
        return user, email_changed

    async def delete_account(self, context: UserContext, confirmation: str) -> None:
        if confirmation != DELETE_CONFIRMATION:
            raise AccountDeletionNotConfirmedError

        user = await self.get_profile(context.user_id)
        await self._user_repo.delete(user.id)
        if context.access_token:
            await self._jwt_service.revoke(context.access_token)
        logger.info("Account deleted: %s", context.user_id)

    async def security_status(self, user_id: UUID) -> SecurityStatus:
        user = await self.get_profile(user_id)

        recommendations = []
        if not user.is_email_verified:
            recommendations.append("Verify your email address")
        if not user.has_usable_password and user.google_id is None:
            recommendations.append("Set a password or link a Google account")

        if user.is_email_verified and (user.has_usable_password or user.google_id):
            level = "high"
        elif user.is_email_verified:
            level = "medium"
        else:
            level = "low"

        return SecurityStatus(
            email_verified=user.is_email_verified,
            has_password=user.has_usable_password,
            google_linked=user.google_id is not None,
            account_age_days=whole_days_since(user.created_at),
            last_login_at=user.last_login_at,
            last_update=user.updated_at,
            security_level=level,
            recommendations=recommendations,
        )
