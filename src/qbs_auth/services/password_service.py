"""Password hashing service using bcrypt.

Hashing and verification are CPU-bound; the async variants run them in a
worker thread so they do not block the event loop.
"""

import asyncio

import bcrypt

from qbs_auth.exceptions import WeakPasswordError

# Stored for accounts created through OAuth; never a valid bcrypt hash.
OAUTH_ONLY_PASSWORD = "!oauth-only"  # NOQA: S105

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")

# bcrypt only uses the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    MIN_LENGTH = 8
    MAX_LENGTH = 128

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
            Higher values are more secure but slower.
        """
        self._rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password is empty or outside the length bounds
        """
        self.validate_length(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(self._encode(password), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a hash.

        Returns False for the OAuth-only sentinel and any other value
        that is not a bcrypt hash.
        """
        if not self.is_usable_hash(password_hash):
            return False
        try:
            return bcrypt.checkpw(
                self._encode(password),
                password_hash.encode("utf-8"),  # type: ignore[union-attr]
            )
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str | None) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    async def burn_verification_time(self, password: str) -> None:
        """Run a comparison against a throwaway hash.

        Used when no account exists so the response time matches a real
        failed comparison.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash_async("dummy-Password-1!")
        await self.verify_async(password, self._dummy_hash)

    def validate_length(self, password: str) -> None:
        """Validate that a password is within the accepted length bounds.

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password) > self.MAX_LENGTH:
            msg = f"Password cannot exceed {self.MAX_LENGTH} characters"
            raise WeakPasswordError(msg)

    @staticmethod
    def is_usable_hash(password_hash: str | None) -> bool:
        """Check whether a stored value is a real bcrypt hash."""
        return bool(password_hash) and password_hash.startswith(BCRYPT_PREFIXES)  # type: ignore[union-attr]

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash needs to be rehashed.

        After changing the rounds setting, existing hashes can be
        identified for rehashing on next login.
        """
        try:
            # Extract rounds from hash (bcrypt format: $2b$XX$...)
            parts = password_hash.split("$")
            if len(parts) >= 3:
                current_rounds = int(parts[2])
                return current_rounds != self._rounds
        except (ValueError, IndexError):
            pass
        return True

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
