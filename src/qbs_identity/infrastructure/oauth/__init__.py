from qbs_identity.infrastructure.oauth.google_client import (
    GoogleOAuthClient,
    GoogleProfile,
    OAuthError,
)

__all__ = ["GoogleOAuthClient", "GoogleProfile", "OAuthError"]
