"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── qbs_auth/              # Token service, revocation, password hashing
    ├── qbs_identity/          # Identity domain (users, validation, services)
    │   ├── unit/              # Fast, isolated tests with mocks
    │   └── persistence/       # Repository tests on in-memory SQLite
    ├── qbs/                   # Settings, engine helpers and the HTTP API
    └── integration/           # Tests against real external services

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os

import pytest

from qbs_config import Settings, clear_settings_cache

TEST_JWT_SECRET = "test-secret-key-for-signing-tokens-0123456789"  # noqa: S105


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need a real external service (auto-skipped)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


def _flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if config.getoption("--run-all") or _flag("RUN_ALL_TESTS"):
        return

    if config.getoption("--run-integration") or _flag("RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def clear_cached_settings():
    """Each test sees freshly loaded settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_settings():
    """Build Settings for tests, ignoring any local .env file.

    Defaults: in-memory SQLite, cheap bcrypt rounds, no SMTP, no Google.
    """

    def _make(**overrides) -> Settings:
        values = {
            "jwt_secret_key": TEST_JWT_SECRET,
            "environment": "test",
            "database_url_override": "sqlite+aiosqlite:///:memory:",
            "bcrypt_rounds": 4,
            "smtp_enabled": False,
            "google_client_id": "",
            "google_client_secret": None,
            "frontend_base_url": "https://app.example.com",
            "log_level": "WARNING",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
