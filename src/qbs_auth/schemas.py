"""Token schemas and data structures."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TokenType(str, Enum):
    """The purpose a token was issued for (the ``type`` claim)."""

    ACCESS = "access"
    REFRESH = "refresh"
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"
    OAUTH_STATE = "oauth_state"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    user_id
        The unique identifier of the user (``None`` for OAuth state tokens)
    email
        The email address the token was issued for
    exp
        Token expiration timestamp
    token_type
        What the token may be used for
    jti
        Unique token id, the key used for revocation
    token_version
        User token version at issuance (password reset tokens only)
    """

    user_id: UUID | None
    email: str | None
    exp: datetime
    token_type: TokenType
    jti: str
    token_version: int | None = None

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == TokenType.ACCESS

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type == TokenType.REFRESH

    def remaining_seconds(self) -> int:
        """Seconds until expiry, never negative."""
        delta = self.exp - datetime.now(tz=self.exp.tzinfo)
        return max(int(delta.total_seconds()), 0)
