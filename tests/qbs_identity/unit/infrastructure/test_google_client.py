"""Unit tests for GoogleOAuthClient using a mocked HTTP transport."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from qbs_identity.infrastructure.oauth import GoogleOAuthClient, GoogleProfile, OAuthError
from qbs_identity.infrastructure.oauth.google_client import (
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
)

USERINFO = {
    "id": "1234567890",
    "email": "ada@mail.com",
    "verified_email": True,
    "name": "Ada Lovelace",
    "given_name": "Ada",
    "family_name": "Lovelace",
}


def _client(handler) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="https://api.mail.com/auth/google/callback",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestAuthorizationUrl:
    def test_contains_client_and_state(self):
        client = GoogleOAuthClient("client-id", "secret", "https://cb")

        url = client.build_authorization_url("signed-state")

        query = parse_qs(urlparse(url).query)
        assert url.startswith("https://accounts.google.com/")
        assert query["client_id"] == ["client-id"]
        assert query["state"] == ["signed-state"]
        assert query["redirect_uri"] == ["https://cb"]
        assert query["response_type"] == ["code"]
        assert "email" in query["scope"][0]


class TestExchangeCode:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == GOOGLE_TOKEN_URL:
                seen["form"] = parse_qs(request.content.decode())
                return httpx.Response(200, json={"access_token": "google-at"})
            if str(request.url) == GOOGLE_USERINFO_URL:
                seen["auth"] = request.headers["Authorization"]
                return httpx.Response(200, json=USERINFO)
            return httpx.Response(404)

        profile = await _client(handler).exchange_code("auth-code")

        assert profile == GoogleProfile(
            google_id="1234567890",
            email="ada@mail.com",
            display_name="Ada Lovelace",
            given_name="Ada",
            family_name="Lovelace",
            email_verified=True,
        )
        assert seen["form"]["code"] == ["auth-code"]
        assert seen["form"]["grant_type"] == ["authorization_code"]
        assert seen["auth"] == "Bearer google-at"

    @pytest.mark.asyncio
    async def test_rejected_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(OAuthError):
            await _client(handler).exchange_code("bad")

    @pytest.mark.asyncio
    async def test_missing_access_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        with pytest.raises(OAuthError, match="access token"):
            await _client(handler).exchange_code("code")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(OAuthError):
            await _client(handler).exchange_code("code")

    @pytest.mark.asyncio
    async def test_profile_without_email(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == GOOGLE_TOKEN_URL:
                return httpx.Response(200, json={"access_token": "google-at"})
            return httpx.Response(200, json={"id": "123"})

        with pytest.raises(OAuthError, match="missing id or email"):
            await _client(handler).exchange_code("code")


class TestGoogleProfile:
    def test_unverified_email_flag(self):
        profile = GoogleProfile.from_userinfo({**USERINFO, "verified_email": False})

        assert profile.email_verified is False

    def test_openid_style_keys(self):
        profile = GoogleProfile.from_userinfo(
            {"sub": "42", "email": "x@mail.com", "email_verified": True},
        )

        assert profile.google_id == "42"
        assert profile.given_name == ""
        assert profile.email_verified is True

    def test_missing_verification_claims_mean_unverified(self):
        profile = GoogleProfile.from_userinfo({"id": "42", "email": "x@mail.com"})

        assert profile.email_verified is False

    def test_string_claim(self):
        profile = GoogleProfile.from_userinfo(
            {"sub": "42", "email": "x@mail.com", "email_verified": "true"},
        )

        assert profile.email_verified is True
