"""
Shared fixtures for integration tests.

Integration tests use the real gateway application with HTTP-level mocking
of the provider. These tests verify the full request -> provider call ->
response cycle without reaching the real provider.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import respx
from fastapi.testclient import TestClient

from append_gateway.app import create_app
from append_gateway.config import clear_settings_cache
from append_gateway.core.state import reset_app_state
from tests.factories import PROVIDER_URL, TEST_API_KEY

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def provider_secrets(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Export provider credentials and the inbound key for the app to read."""
    values = {
        "DATAZAPP_API_KEY": "provider-key",
        "DATAZAPP_USER": "provider-user",
        "DATAZAPP_PASSWORD": "provider-pass",
        "PROXY_API_KEY": TEST_API_KEY,
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def provider_mock() -> Iterator[respx.MockRouter]:
    """Intercept outbound HTTP; only the provider endpoint is routed."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def provider_route(provider_mock: respx.MockRouter) -> respx.Route:
    """The provider endpoint route; tests attach responses to it."""
    return provider_mock.post(PROVIDER_URL)


@pytest.fixture
def client(
    provider_secrets: dict[str, str],
    provider_mock: respx.MockRouter,
) -> Iterator[TestClient]:
    """
    Create test client with the real gateway application.

    Uses context manager to trigger lifespan events (client initialization).
    """
    clear_settings_cache()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    reset_app_state()
    clear_settings_cache()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers carrying the valid inbound API key."""
    return {"x-api-key": TEST_API_KEY}
