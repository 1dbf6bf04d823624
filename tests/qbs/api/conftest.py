"""
Pytest fixtures for HTTP API tests.

The app runs against an in-memory SQLite database created by the app
lifespan. Outbound email is captured by a recording notifier and Google
is replaced by a fake client, so no network is touched.
"""

from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from qbs.presentation.api.app import create_app
from qbs.presentation.api.dependencies import get_google_client, get_notifier
from qbs_identity.infrastructure.email import Notifier
from qbs_identity.infrastructure.oauth import GoogleProfile, OAuthError

DEFAULT_PASSWORD = "Secure-Pass1!"  # noqa: S105


@dataclass
class SentEmail:
    kind: str
    to_email: str
    link: str

    @property
    def token(self) -> str:
        return parse_qs(urlparse(self.link).query)["token"][0]


class RecordingNotifier(Notifier):
    """Notifier that keeps every email in memory."""

    def __init__(self):
        self.sent: list[SentEmail] = []

    def send_welcome(self, to_email, name, verification_link):
        self.sent.append(SentEmail("welcome", to_email, verification_link))

    def send_verification(self, to_email, name, verification_link):
        self.sent.append(SentEmail("verification", to_email, verification_link))

    def send_password_reset(self, to_email, reset_link):
        self.sent.append(SentEmail("password_reset", to_email, reset_link))

    def last(self, kind: str, to_email: str | None = None) -> SentEmail:
        for email in reversed(self.sent):
            if email.kind == kind and (to_email is None or email.to_email == to_email):
                return email
        msg = f"No {kind} email sent"
        raise AssertionError(msg)


@dataclass
class FakeGoogleClient:
    """Stand-in for GoogleOAuthClient; maps codes to prepared profiles."""

    profiles: dict[str, GoogleProfile] = field(default_factory=dict)
    exchanged: list[str] = field(default_factory=list)

    def build_authorization_url(self, state: str) -> str:
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}"

    async def exchange_code(self, code: str) -> GoogleProfile:
        self.exchanged.append(code)
        if code not in self.profiles:
            raise OAuthError
        return self.profiles[code]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def google_client() -> FakeGoogleClient:
    return FakeGoogleClient()


@pytest.fixture
def client_factory(make_settings, notifier, google_client):
    """Build TestClients for apps with per-test settings overrides."""
    clients = []

    def _make(with_google: bool = True, **overrides) -> TestClient:
        app = create_app(make_settings(**overrides))
        app.dependency_overrides[get_notifier] = lambda: notifier
        if with_google:
            app.dependency_overrides[get_google_client] = lambda: google_client
        test_client = TestClient(app, raise_server_exceptions=False)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(client_factory) -> TestClient:
    return client_factory()


@pytest.fixture
def register_user(client, notifier):
    """Register through the API; optionally verify and log in."""

    def _register(
        email: str = "a@b.com",
        password: str = DEFAULT_PASSWORD,
        verify: bool = True,
        login: bool = True,
    ) -> dict:
        response = client.post(
            "/auth/register",
            json={
                "email": email,
                "password": password,
                "first_name": "Ada",
                "last_name": "Lovelace",
            },
        )
        assert response.status_code == 201, response.text
        result = {"user": response.json()["user"]}

        if verify:
            token = notifier.last("welcome", email.lower()).token
            verified = client.get("/auth/verify-email", params={"token": token})
            assert verified.status_code == 200, verified.text

        if login:
            logged_in = client.post(
                "/auth/login",
                json={"email": email, "password": password},
            )
            assert logged_in.status_code == 200, logged_in.text
            result.update(logged_in.json())
        return result

    return _register


@pytest.fixture
def auth_header():
    def _header(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _header
