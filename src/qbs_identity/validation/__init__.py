"""Password policy and input sanitization pipeline.

``parse_input(Model, payload)`` turns an untrusted mapping into a
normalized, typed input or raises ValidationError listing every
(field, message) failure.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from qbs.domain.shared.exceptions import FieldError, ValidationError
from qbs_identity.validation.inputs import (
    AccountDeletionInput,
    ForgotPasswordInput,
    LoginInput,
    LogoutInput,
    ProfileUpdateInput,
    RefreshTokenInput,
    RegistrationInput,
    ResendVerificationInput,
    ResetPasswordInput,
    StrictInput,
)
from qbs_identity.validation.rules import (
    check_email_domain,
    check_password_policy,
    sanitize_name,
    sanitize_text,
    strip_markup,
    validate_country_code,
    validate_email,
)

InputT = TypeVar("InputT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def field_errors_from(
    errors: Iterable[Mapping[str, Any]],
    skip_loc_prefix: Sequence[str] = (),
) -> list[FieldError]:
    """Convert pydantic error dicts into (field, message) pairs."""
    result: list[FieldError] = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if skip_loc_prefix and loc[: len(skip_loc_prefix)] == list(skip_loc_prefix):
            loc = loc[len(skip_loc_prefix) :]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX) :]
        result.append(FieldError(field=".".join(loc) or "body", message=message))
    return result


def parse_input(model: type[InputT], payload: Mapping[str, Any]) -> InputT:
    """Validate and normalize a raw payload.

    Raises
    ------
    ValidationError
        With one FieldError per failing field
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(errors=field_errors_from(e.errors())) from e


__all__ = [
    "AccountDeletionInput",
    "ForgotPasswordInput",
    "LoginInput",
    "LogoutInput",
    "ProfileUpdateInput",
    "RefreshTokenInput",
    "RegistrationInput",
    "ResendVerificationInput",
    "ResetPasswordInput",
    "StrictInput",
    "check_email_domain",
    "check_password_policy",
    "field_errors_from",
    "parse_input",
    "sanitize_name",
    "sanitize_text",
    "strip_markup",
    "validate_country_code",
    "validate_email",
]
