"""Password policy and input sanitization rules.

Pure functions: each takes raw input and returns the normalized value or
raises ValueError with a message safe to show to the user. Pydantic input
models call them from field validators, but they have no transport
dependency and are usable on their own.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable

from email_validator import EmailNotValidError
from email_validator import validate_email as _validate_email_syntax

from qbs_identity.domain.user.exceptions import InvalidEmailError
from qbs_identity.domain.user.value_objects.email import (
    MAX_EMAIL_LENGTH,
    Email,
    normalize_email,
)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
PASSWORD_SYMBOLS = "@$!%*?&"
COMMON_PASSWORDS = frozenset({"password", "12345678", "qwerty123", "password123"})

NAME_MAX_LENGTH = 50
NAME_PATTERN = re.compile(r"^[a-zA-Z '-]+$")
COUNTRY_MAX_LENGTH = 100
COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")

_SCRIPT_BLOCK = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_TAG = re.compile(r"<[^>]*>")


def strip_markup(value: str) -> str:
    """Remove script/style blocks and HTML tags."""
    return _TAG.sub("", _SCRIPT_BLOCK.sub("", value))


def validate_email(value: str) -> str:
    """Validate address grammar and return the canonical (lower-case) form."""
    normalized = normalize_email(value)
    if not normalized:
        msg = "Email is required"
        raise ValueError(msg)
    if len(normalized) > MAX_EMAIL_LENGTH:
        msg = f"Email cannot exceed {MAX_EMAIL_LENGTH} characters"
        raise ValueError(msg)
    try:
        _validate_email_syntax(normalized, check_deliverability=False)
        Email(normalized)
    except (EmailNotValidError, InvalidEmailError) as e:
        msg = "Please provide a valid email address"
        raise ValueError(msg) from e
    return normalized


def check_email_domain(email: str, blocked_domains: Iterable[str]) -> str:
    """Reject addresses on a disposable-email denylist."""
    domain = email.rsplit("@", 1)[-1].lower()
    if domain in {d.lower() for d in blocked_domains}:
        msg = "Disposable email addresses are not allowed"
        raise ValueError(msg)
    return email


def check_password_policy(password: str) -> str:
    """Enforce the registration/reset password policy."""
    if len(password) < PASSWORD_MIN_LENGTH or len(password) > PASSWORD_MAX_LENGTH:
        msg = (
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters"
        )
        raise ValueError(msg)

    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
        and any(ch in PASSWORD_SYMBOLS for ch in password)
    ):
        msg = (
            "Password must contain at least one lowercase letter, one uppercase "
            f"letter, one number and one special character ({PASSWORD_SYMBOLS})"
        )
        raise ValueError(msg)

    if password.lower() in COMMON_PASSWORDS:
        msg = "Password is too common. Please choose a stronger password"
        raise ValueError(msg)

    return password


def sanitize_name(value: str, label: str = "Name") -> str:
    """Trim, strip markup, then restrict to letters, spaces, ' and -."""
    cleaned = strip_markup(value).strip()
    if not cleaned or len(cleaned) > NAME_MAX_LENGTH:
        msg = f"{label} must be between 1 and {NAME_MAX_LENGTH} characters"
        raise ValueError(msg)
    if not NAME_PATTERN.match(cleaned):
        msg = f"{label} can only contain letters, spaces, hyphens, and apostrophes"
        raise ValueError(msg)
    return cleaned


def sanitize_text(value: str, max_length: int = COUNTRY_MAX_LENGTH) -> str:
    """Free text: strip markup and neutralize what is left."""
    cleaned = html.escape(strip_markup(value).strip(), quote=False)
    if len(cleaned) > max_length:
        msg = f"Value cannot exceed {max_length} characters"
        raise ValueError(msg)
    return cleaned


def validate_country_code(value: str) -> str:
    """Two-letter (ISO 3166-1 alpha-2 style) country code."""
    code = value.strip().upper()
    if not COUNTRY_CODE_PATTERN.match(code):
        msg = "Country must be a valid 2-letter country code"
        raise ValueError(msg)
    return code
