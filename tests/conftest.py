"""Pytest configuration for async testing.

This configuration ensures:
1. Async tests are marked for pytest-asyncio (asyncio_mode = "auto")
2. Container singletons and cached settings never leak between tests
3. Tests run with a complete, valid environment
"""

import inspect

import pytest

from src.core.config import get_settings

TEST_ENV = {
    "ENVIRONMENT": "testing",
    "SECRET_KEY": "test-secret-key-that-is-at-least-32-chars-long",
    "REFRESH_TOKEN_SALT": "test-refresh-token-salt",
    "BCRYPT_ROUNDS": "4",
}


@pytest.fixture
def test_env(monkeypatch):
    """Minimal valid environment for Settings; clears cached settings."""
    for name in (
        "DATABASE_URL",
        "REDIS_URL",
        "RATE_LIMIT_ENABLED",
        "CAPTCHA_ENABLED",
        "LOG_LEVEL",
        "ACCOUNT_LOCKOUT_THRESHOLD",
        "ACCOUNT_LOCKOUT_WINDOW_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    for name, value in TEST_ENV.items():
        monkeypatch.setenv(name, value)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with real database or Redis"
    )


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        function = getattr(item, "function", None)
        if function is not None and inspect.iscoroutinefunction(function):
            item.add_marker(pytest.mark.asyncio)
