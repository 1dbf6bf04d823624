import logging

from qbs_auth import InvalidTokenError, JWTService, PasswordHashingService, WeakPasswordError
from qbs_identity.domain.user import UserRepository, normalize_email
from qbs_identity.exceptions import InvalidResetTokenError
from qbs_identity.infrastructure.email import Notifier
from qbs_identity.validation.rules import check_password_policy

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for handling password reset requests and token validation."""

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        notifier: Notifier,
        frontend_base_url: str,
    ):
        self._user_repo = user_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._notifier = notifier
        self._frontend_base_url = frontend_base_url.rstrip("/")

    async def request_reset(self, email: str) -> None:
        user = await self._user_repo.find_by_email(normalize_email(email))
        if not user:
            # Silent fail to prevent email enumeration
            logger.debug("Password reset requested for unknown email")
            return

        if not user.has_usable_password:
            logger.info("Password reset skipped for Google-only account: %s", user.id)
            return

        # Bound to the current token version; any password change voids it
        raw_token = self._jwt_service.create_password_reset_token(
            user_id=user.id,
            email=user.email,
            token_version=user.token_version,
        )
        reset_link = f"{self._frontend_base_url}/reset-password?token={raw_token}"
        self._notifier.send_password_reset(user.email, reset_link)
        logger.info("Password reset email scheduled for user: %s", user.id)

    async def reset_password(self, token: str, new_password: str) -> None:
        try:
            payload = self._jwt_service.verify_password_reset_token(token)
        except InvalidTokenError as e:
            raise InvalidResetTokenError from e

        user = None
        if payload.user_id is not None:
            user = await self._user_repo.find_by_id(payload.user_id)
        if not user:
            raise InvalidResetTokenError

        if payload.token_version != user.token_version:
            # Already used, or the password changed after it was issued
            raise InvalidResetTokenError

        try:
            check_password_policy(new_password)
        except ValueError as e:
            raise WeakPasswordError(str(e)) from e

        new_hash = await self._password_service.hash_async(new_password)
        user.change_password(new_hash)
        await self._user_repo.save(user)
        logger.info("Password reset completed for user: %s", user.id)
