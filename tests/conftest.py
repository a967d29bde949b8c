"""Shared fixtures for originguard tests.

Clears CORS-related environment variables and the settings cache so each
test starts from the built-in defaults, and provides a TestClient bound to
a freshly created app.
"""

import pytest
from fastapi.testclient import TestClient

from originguard.config import Settings, reset_settings
from originguard.main import create_app
from originguard.services.policy import AllowedOriginSet, PolicyConfiguration

ALLOWED = "http://localhost:5173"
EVIL = "http://evil.example"

_ENV_VARS = (
    "APP_ENV",
    "CORS_ORIGINS",
    "CORS_DEV_ORIGINS",
    "CORS_PROD_ORIGINS",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
    "CORS_ALLOW_CREDENTIALS",
    "CORS_PREFLIGHT_STATUS",
    "MAX_BODY_BYTES",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Isolate tests from the caller's environment and the settings cache."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def policy() -> PolicyConfiguration:
    return PolicyConfiguration(allowed_origins=AllowedOriginSet.of([ALLOWED]))


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, cors_origins=ALLOWED)


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
