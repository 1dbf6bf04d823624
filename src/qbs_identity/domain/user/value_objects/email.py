"""Email value object.

Accounts are keyed by the trimmed, lower-cased address; two spellings
that differ only in case or surrounding whitespace are the same account.
"""

import re
from dataclasses import dataclass

from qbs_identity.domain.user.exceptions import InvalidEmailError

# local@domain.tld; deliverability checks happen at the API boundary
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

MAX_EMAIL_LENGTH = 254


def normalize_email(value: str) -> str:
    """Canonical form of an address: trimmed and lower-cased."""
    return value.strip().lower()


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        normalized = normalize_email(self.value)

        if len(normalized) > MAX_EMAIL_LENGTH:
            msg = f"Email cannot exceed {MAX_EMAIL_LENGTH} characters"
            raise InvalidEmailError(msg)

        if not EMAIL_PATTERN.match(normalized):
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg)

        object.__setattr__(self, "value", normalized)

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
