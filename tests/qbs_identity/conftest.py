"""Shared fixtures for qbs_identity tests."""

from unittest.mock import AsyncMock, Mock

import pytest

from qbs_auth import JWTService, PasswordHashingService
from qbs_identity.domain.user import User, UserRepository
from qbs_identity.infrastructure.email import Notifier

TEST_SECRET = "identity-test-secret"
FRONTEND = "https://app.example.com"


@pytest.fixture
def user_repository():
    """AsyncMock repository with no users by default."""
    repo = AsyncMock(spec=UserRepository)
    repo.find_by_id.return_value = None
    repo.find_by_email.return_value = None
    repo.find_by_google_id.return_value = None
    repo.exists_by_email.return_value = False
    return repo


@pytest.fixture
def jwt_service():
    return JWTService(secret_key=TEST_SECRET)


@pytest.fixture
def password_service():
    return PasswordHashingService(rounds=4)


@pytest.fixture
def notifier():
    return Mock(spec=Notifier)


@pytest.fixture
def make_user(password_service):
    """Factory for users with a real (low-cost) password hash."""

    def _make(
        email: str = "ada@mail.com",
        password: str = "Secure-Pass1!",
        verified: bool = True,
        **kwargs,
    ) -> User:
        return User(
            email=email,
            first_name=kwargs.pop("first_name", "Ada"),
            last_name=kwargs.pop("last_name", "Lovelace"),
            password_hash=password_service.hash(password),
            is_email_verified=verified,
            **kwargs,
        )

    return _make
