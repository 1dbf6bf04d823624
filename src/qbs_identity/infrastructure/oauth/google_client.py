"""HTTP client for Google OAuth 2.0 (authorization code flow)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from qbs.domain.shared.exceptions import DomainException, ErrorCode

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # NOQA: S105
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_SCOPE = "openid email profile"


class OAuthError(DomainException):
    """The provider round-trip failed or returned an unusable profile."""

    def __init__(self, message: str = "Google authentication failed") -> None:
        super().__init__(message, ErrorCode.OAUTH_FAILED)


@dataclass(frozen=True)
class GoogleProfile:
    """The subset of the Google userinfo response we rely on."""

    google_id: str
    email: str
    display_name: str = ""
    given_name: str = ""
    family_name: str = ""
    email_verified: bool = False

    @classmethod
    def from_userinfo(cls, data: dict) -> GoogleProfile:
        google_id = str(data.get("id") or data.get("sub") or "")
        email = str(data.get("email") or "")
        if not google_id or not email:
            msg = "Google profile is missing id or email"
            raise OAuthError(msg)
        return cls(
            google_id=google_id,
            email=email,
            display_name=str(data.get("name") or ""),
            given_name=str(data.get("given_name") or ""),
            family_name=str(data.get("family_name") or ""),
            email_verified=_claims_verified(data),
        )


def _claims_verified(data: dict) -> bool:
    # v2 userinfo says verified_email, OpenID Connect says email_verified;
    # an address is unverified unless one of them is true
    claims = (data.get("verified_email"), data.get("email_verified"))
    return any(claim is True or claim == "true" for claim in claims)


class GoogleOAuthClient:
    """Builds the consent redirect and exchanges codes for profiles."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._timeout = timeout
        self._http_client = http_client

    def build_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": GOOGLE_SCOPE,
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleProfile:
        """Exchange an authorization code for the user's Google profile.

        Raises
        ------
        OAuthError
            If Google rejects the code, is unreachable, or returns an
            unusable profile
        """
        if self._http_client is not None:
            return await self._exchange(self._http_client, code)
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=False,
        ) as client:
            return await self._exchange(client, code)

    async def _exchange(self, client: httpx.AsyncClient, code: str) -> GoogleProfile:
        try:
            token_response = await client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "code": code,
                    "redirect_uri": self._redirect_uri,
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
            token_response.raise_for_status()
            access_token = token_response.json().get("access_token")
            if not access_token:
                msg = "Google did not return an access token"
                raise OAuthError(msg)

            userinfo_response = await client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            userinfo_response.raise_for_status()
            return GoogleProfile.from_userinfo(userinfo_response.json())

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google OAuth returned error %d: %s",
                e.response.status_code,
                e.response.text[:200] if e.response.text else "no body",
            )
            raise OAuthError from e
        except httpx.HTTPError as e:
            logger.warning("Google OAuth request failed (%s): %s", type(e).__name__, e)
            raise OAuthError from e
        except ValueError as e:
            logger.warning("Google OAuth returned invalid JSON: %s", e)
            raise OAuthError from e
