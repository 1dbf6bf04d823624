"""Authentication schemas for response models.

Request bodies are the sanitizing input models from
``qbs_identity.validation``; only responses are defined here.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Minimal user profile returned by auth endpoints. Never the hash."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    country: str | None = None
    is_email_verified: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "user@example.com",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "country": "United Kingdom",
                "is_email_verified": True,
                "created_at": "2024-01-15T10:30:00Z",
                "last_login_at": "2024-01-16T08:00:00Z",
            },
        },
    )


class RegisterResponse(BaseModel):
    """Response after registration.

    Tokens are only present when registration auto-login is enabled.
    """

    message: str
    user: UserResponse
    email_verification_required: bool
    is_new_user: bool = True
    redirect_to: str = "onboarding"
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = Field(
        default=None,
        description="Access token lifetime in seconds",
    )


class AuthResponse(BaseModel):
    """Response for successful login."""

    message: str = "Login successful"
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class TokenResponse(BaseModel):
    """Response for token refresh.

    ``refresh_token`` is only set when refresh token rotation is enabled.
    """

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class MessageResponse(BaseModel):
    message: str


class ProtectedResponse(BaseModel):
    message: str
    user: UserResponse
