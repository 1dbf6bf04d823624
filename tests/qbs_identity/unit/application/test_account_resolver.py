"""Unit tests for AccountResolver."""

import pytest

from qbs_auth import (
    OAUTH_ONLY_PASSWORD,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    WrongAuthMethodError,
)
from qbs_identity.application.services import AccountResolver
from qbs_identity.domain.user import (
    EmailAlreadyExistsError,
    GoogleAccountAlreadyLinkedError,
    User,
)
from qbs_identity.infrastructure.oauth import GoogleProfile, OAuthError
from qbs_identity.validation import RegistrationInput, parse_input


class TestAuthenticate:
    """Tests for password authentication."""

    @pytest.fixture(autouse=True)
    def _setup(self, user_repository, password_service, make_user):
        self.repo = user_repository
        self.resolver = AccountResolver(user_repository, password_service)
        self.make_user = make_user

    @pytest.mark.asyncio
    async def test_success_records_login(self):
        user = self.make_user()
        self.repo.find_by_email.return_value = user

        result = await self.resolver.authenticate("ADA@mail.com", "Secure-Pass1!")

        assert result is user
        assert user.last_login_at is not None
        self.repo.find_by_email.assert_awaited_once_with("ada@mail.com")
        self.repo.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(self):
        with pytest.raises(InvalidCredentialsError) as unknown:
            await self.resolver.authenticate("ghost@mail.com", "Secure-Pass1!")

        self.repo.find_by_email.return_value = self.make_user()
        with pytest.raises(InvalidCredentialsError) as wrong:
            await self.resolver.authenticate("ada@mail.com", "Wrong-Pass1!")

        assert unknown.value.message == wrong.value.message
        self.repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_oauth_only_account_gets_wrong_auth_method(self):
        self.repo.find_by_email.return_value = User(
            email="ada@mail.com",
            first_name="Ada",
            last_name="",
            password_hash=OAUTH_ONLY_PASSWORD,
            google_id="g-1",
            is_email_verified=True,
        )

        with pytest.raises(WrongAuthMethodError):
            await self.resolver.authenticate("ada@mail.com", OAUTH_ONLY_PASSWORD)

    @pytest.mark.asyncio
    async def test_unverified_email_is_forbidden(self):
        self.repo.find_by_email.return_value = self.make_user(verified=False)

        with pytest.raises(EmailNotVerifiedError):
            await self.resolver.authenticate("ada@mail.com", "Secure-Pass1!")

    @pytest.mark.asyncio
    async def test_unverified_allowed_when_not_required(
        self,
        user_repository,
        password_service,
    ):
        resolver = AccountResolver(
            user_repository,
            password_service,
            require_email_verification=False,
        )
        self.repo.find_by_email.return_value = self.make_user(verified=False)

        user = await resolver.authenticate("ada@mail.com", "Secure-Pass1!")

        assert not user.is_email_verified


class TestRegister:
    @pytest.fixture(autouse=True)
    def _setup(self, user_repository, password_service):
        self.repo = user_repository
        self.password_service = password_service
        self.resolver = AccountResolver(user_repository, password_service)
        self.data = parse_input(
            RegistrationInput,
            {
                "email": "a@b.com",
                "password": "Secure-Pass1!",
                "first_name": "Ada",
                "last_name": "Lovelace",
            },
        )

    @pytest.mark.asyncio
    async def test_creates_unverified_user_with_hash(self):
        user = await self.resolver.register(self.data)

        assert user.email == "a@b.com"
        assert not user.is_email_verified
        assert user.password_hash != "Secure-Pass1!"
        assert self.password_service.verify("Secure-Pass1!", user.password_hash)
        self.repo.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self):
        self.repo.exists_by_email.return_value = True

        with pytest.raises(EmailAlreadyExistsError):
            await self.resolver.register(self.data)

        self.repo.save.assert_not_called()


class TestResolveGoogle:
    """Tests for the Google account resolution order."""

    @pytest.fixture(autouse=True)
    def _setup(self, user_repository, password_service, make_user):
        self.repo = user_repository
        self.resolver = AccountResolver(user_repository, password_service)
        self.make_user = make_user
        self.profile = GoogleProfile(
            google_id="g-42",
            email="Ada@Mail.com",
            email_verified=True,
            display_name="Ada Lovelace",
            given_name="Ada",
            family_name="Lovelace",
        )

    @pytest.mark.asyncio
    async def test_existing_google_account_logs_in(self):
        existing = self.make_user(google_id="g-42")
        self.repo.find_by_google_id.return_value = existing

        resolved = await self.resolver.resolve_google(self.profile)

        assert resolved.user is existing
        assert resolved.is_new is False
        assert resolved.linked is False
        self.repo.find_by_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_email_is_linked(self):
        existing = self.make_user(verified=False)
        self.repo.find_by_email.return_value = existing

        resolved = await self.resolver.resolve_google(self.profile)

        assert resolved.user is existing
        assert resolved.linked is True
        assert resolved.is_new is False
        assert existing.google_id == "g-42"
        assert existing.is_email_verified
        assert existing.has_usable_password
        self.repo.find_by_email.assert_awaited_once_with("ada@mail.com")

    @pytest.mark.asyncio
    async def test_unverified_google_email_is_not_linked(self):
        existing = self.make_user()
        self.repo.find_by_email.return_value = existing
        profile = GoogleProfile(
            google_id="g-42",
            email="ada@mail.com",
            email_verified=False,
        )

        with pytest.raises(OAuthError):
            await self.resolver.resolve_google(profile)

        assert existing.google_id is None
        self.repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_email_linked_to_other_google_account_conflicts(self):
        self.repo.find_by_email.return_value = self.make_user(google_id="g-other")

        with pytest.raises(GoogleAccountAlreadyLinkedError):
            await self.resolver.resolve_google(self.profile)

    @pytest.mark.asyncio
    async def test_new_account_created(self):
        resolved = await self.resolver.resolve_google(self.profile)

        assert resolved.is_new is True
        user = resolved.user
        assert user.email == "ada@mail.com"
        assert user.google_id == "g-42"
        assert user.first_name == "Ada"
        assert user.last_name == "Lovelace"
        assert user.is_email_verified
        assert user.is_oauth_only
        self.repo.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_new_account_name_falls_back_to_email(self):
        profile = GoogleProfile(google_id="g-7", email="grace@mail.com")

        resolved = await self.resolver.resolve_google(profile)

        assert resolved.user.first_name == "grace"
        assert resolved.user.last_name == ""

    @pytest.mark.asyncio
    async def test_new_account_name_markup_is_stripped(self):
        profile = GoogleProfile(
            google_id="g-8",
            email="x@mail.com",
            given_name="<b>Bob</b>",
            family_name="X" * 80,
        )

        resolved = await self.resolver.resolve_google(profile)

        assert resolved.user.first_name == "Bob"
        assert len(resolved.user.last_name) == 50
