"""Unit tests for PasswordResetService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from qbs_auth import OAUTH_ONLY_PASSWORD, WeakPasswordError
from qbs_identity.application.services import PasswordResetService
from qbs_identity.domain.user import User
from qbs_identity.exceptions import InvalidResetTokenError

FRONTEND = "https://app.example.com"


class TestRequestReset:
    """Tests for requesting a reset email."""

    @pytest.fixture(autouse=True)
    def _setup(self, user_repository, password_service, jwt_service, notifier, make_user):
        self.repo = user_repository
        self.notifier = notifier
        self.jwt = jwt_service
        self.service = PasswordResetService(
            user_repository,
            password_service,
            jwt_service,
            notifier,
            frontend_base_url=FRONTEND,
        )
        self.user = make_user()

    @pytest.mark.asyncio
    async def test_sends_link_for_known_user(self):
        self.repo.find_by_email.return_value = self.user

        await self.service.request_reset("Ada@Mail.com")

        self.repo.find_by_email.assert_awaited_once_with("ada@mail.com")
        self.notifier.send_password_reset.assert_called_once()
        to_email, link = self.notifier.send_password_reset.call_args.args
        assert to_email == self.user.email
        assert link.startswith(f"{FRONTEND}/reset-password?token=")

        token = link.split("token=", 1)[1]
        payload = self.jwt.verify_password_reset_token(token)
        assert payload.user_id == self.user.id
        assert payload.token_version == self.user.token_version

    @pytest.mark.asyncio
    async def test_silent_for_unknown_email(self):
        await self.service.request_reset("ghost@mail.com")

        self.notifier.send_password_reset.assert_not_called()

    @pytest.mark.asyncio
    async def test_silent_for_google_only_account(self):
        self.repo.find_by_email.return_value = User(
            email="g@mail.com",
            first_name="G",
            last_name="",
            password_hash=OAUTH_ONLY_PASSWORD,
            google_id="g-1",
            is_email_verified=True,
        )

        await self.service.request_reset("g@mail.com")

        self.notifier.send_password_reset.assert_not_called()


class TestResetPassword:
    """Tests for consuming a reset token."""

    @pytest.fixture(autouse=True)
    def _setup(self, user_repository, password_service, jwt_service, notifier, make_user):
        self.repo = user_repository
        self.jwt = jwt_service
        self.password_service = password_service
        self.service = PasswordResetService(
            user_repository,
            password_service,
            jwt_service,
            notifier,
            frontend_base_url=FRONTEND,
        )
        self.user = make_user()
        self.repo.find_by_id.return_value = self.user

    def _token(self, **kwargs) -> str:
        return self.jwt.create_password_reset_token(
            self.user.id,
            self.user.email,
            token_version=kwargs.pop("token_version", self.user.token_version),
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_success_changes_password(self):
        await self.service.reset_password(self._token(), "New-Secure1!")

        assert self.password_service.verify("New-Secure1!", self.user.password_hash)
        assert not self.password_service.verify("Secure-Pass1!", self.user.password_hash)
        self.repo.save.assert_awaited_once_with(self.user)

    @pytest.mark.asyncio
    async def test_token_cannot_be_reused(self):
        token = self._token()
        await self.service.reset_password(token, "New-Secure1!")

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password(token, "Other-Secure1!")

    @pytest.mark.asyncio
    async def test_expired_token(self):
        token = self._token(expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password(token, "New-Secure1!")

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password("invalid_token", "New-Secure1!")

    @pytest.mark.asyncio
    async def test_verification_token_is_not_a_reset_token(self):
        token = self.jwt.create_email_verification_token(self.user.id, self.user.email)

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password(token, "New-Secure1!")

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        self.repo.find_by_id.return_value = None
        token = self.jwt.create_password_reset_token(uuid4(), "x@mail.com", 0)

        with pytest.raises(InvalidResetTokenError):
            await self.service.reset_password(token, "New-Secure1!")

    @pytest.mark.asyncio
    async def test_weak_password_keeps_token_usable(self):
        token = self._token()

        with pytest.raises(WeakPasswordError):
            await self.service.reset_password(token, "weak")

        self.repo.save.assert_not_called()
        await self.service.reset_password(token, "New-Secure1!")
