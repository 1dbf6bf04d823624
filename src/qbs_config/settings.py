"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. QBS_ENV_FILE environment variable (absolute path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DISPOSABLE_EMAIL_DOMAINS = (
    "10minutemail.com",
    "tempmail.org",
    "guerrillamail.com",
)


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. QBS_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("QBS_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app refuses to start without it)
    jwt_secret_key: SecretStr  # Secret for signing JWT tokens

    # Application
    app_name: str = "QB Securiegnty"
    environment: Literal["development", "test", "production"] = "production"
    debug: bool = False

    # Database (POSTGRES_ prefix)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr | None = None
    postgres_db: str = "qbs"
    database_url_override: str | None = None  # e.g. sqlite+aiosqlite:///./qbs.db
    db_timeout_seconds: float = 10.0

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_debug: bool = False
    api_prefix: str = ""
    api_cors_origins: str = ""  # Empty = no CORS allowed (secure default)

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Ensure cors_origins is stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    @field_validator("jwt_secret_key")
    @classmethod
    def _validate_jwt_secret_key(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            msg = "JWT_SECRET_KEY must not be blank"
            raise ValueError(msg)
        return v

    # JWT
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7
    jwt_rotate_refresh_tokens: bool = False
    email_verification_expire_hours: int = 24
    password_reset_expire_minutes: int = 60

    # Token revocation
    revocation_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"

    # Accounts
    bcrypt_rounds: int = 12
    require_email_verification: bool = True
    registration_auto_login: bool = False
    disposable_email_domains: list[str] = list(DEFAULT_DISPOSABLE_EMAIL_DOMAINS)

    # Google OAuth (GOOGLE_ prefix)
    google_client_id: str = ""
    google_client_secret: SecretStr | None = None
    google_redirect_uri: str = "http://localhost:5000/auth/google/callback"
    google_timeout_seconds: float = 10.0

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = ""
    smtp_from_name: str = "QB Securiegnty"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Frontend URL (for verification, reset and OAuth redirect links)
    frontend_base_url: str = "http://localhost:5173"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Construct the database URL from components."""
        if self.database_url_override:
            return self.database_url_override
        password = (
            self.postgres_password.get_secret_value()
            if self.postgres_password
            else ""
        )
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(
            self.google_client_id
            and self.google_client_secret
            and self.google_client_secret.get_secret_value()
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    JWT_SECRET_KEY must be provided via environment variables or .env file;
    a missing or blank secret raises a validation error here.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
