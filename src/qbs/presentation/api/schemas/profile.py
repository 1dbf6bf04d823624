"""Profile schemas for response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    """The signed-in user's own profile."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    country: str | None = None
    is_email_verified: bool
    has_password: bool
    google_linked: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None


class ProfileUpdateResponse(BaseModel):
    message: str
    user: ProfileResponse
    email_changed: bool
    email_verification_required: bool


class SecurityStatusResponse(BaseModel):
    """Account security overview."""

    email_verified: bool
    has_password: bool
    google_linked: bool
    account_age_days: int
    last_login_at: datetime | None = None
    last_update: datetime
    security_level: str
    recommendations: list[str]
