"""Typed input models for every auth operation.

All models forbid unknown fields, so a payload carrying anything extra
(``is_email_verified``, ``id``...) fails as a whole instead of having the
field silently dropped.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from qbs_identity.validation import rules


class StrictInput(BaseModel):
    """Base for sanitized inputs: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class RegistrationInput(StrictInput):
    """Registration payload."""

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="Password (8-128 characters)")
    first_name: str
    last_name: str
    country: str | None = Field(default=None, description="Optional, max 100 chars")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "Secure-Pass1!",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "country": "United Kingdom",
            },
        },
    )

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return rules.validate_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return rules.check_password_policy(v)

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return rules.sanitize_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return rules.sanitize_name(v, "Last name")

    @field_validator("country")
    @classmethod
    def _country(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return rules.sanitize_text(v, rules.COUNTRY_MAX_LENGTH) or None


class LoginInput(StrictInput):
    """Login payload. Only shape is checked; no policy on the password."""

    email: str
    password: str = Field(..., min_length=1, max_length=rules.PASSWORD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return rules.validate_email(v)


class EmailOnlyInput(StrictInput):
    email: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return rules.validate_email(v)


class ForgotPasswordInput(EmailOnlyInput):
    """Request a password reset email."""


class ResendVerificationInput(EmailOnlyInput):
    """Request a fresh verification email."""


class ResetPasswordInput(StrictInput):
    """Reset a password with a token from the reset email."""

    token: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def _new_password(cls, v: str) -> str:
        return rules.check_password_policy(v)


class RefreshTokenInput(StrictInput):
    refresh_token: str = Field(..., min_length=1)


class LogoutInput(StrictInput):
    """Optional logout body: also revoke the refresh token if given."""

    refresh_token: str | None = None


class ProfileUpdateInput(StrictInput):
    """Partial profile update. Only these four fields may change."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    country: str | None = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str | None) -> str | None:
        return None if v is None else rules.sanitize_name(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str | None) -> str | None:
        return None if v is None else rules.sanitize_name(v, "Last name")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return None if v is None else rules.validate_email(v)

    @field_validator("country")
    @classmethod
    def _country(cls, v: str | None) -> str | None:
        return None if v is None else rules.validate_country_code(v)

    @model_validator(mode="after")
    def _at_least_one_field(self) -> "ProfileUpdateInput":
        if not self.model_fields_set:
            msg = "At least one field must be provided"
            raise ValueError(msg)
        return self


class AccountDeletionInput(StrictInput):
    """Explicit confirmation required to delete an account."""

    confirm_delete: str
