"""
Shared fixtures for unit tests.

The enrichment gateway and app state are mocked so router tests run in
isolation without I/O or network access.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from append_gateway.config import GatewaySecrets
from append_gateway.schemas import BatchItem, ContactRecord
from tests.factories import TEST_API_KEY

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Generator


@pytest.fixture
def sample_contact() -> ContactRecord:
    """A contact record as the gateway would return it."""
    return ContactRecord(
        first_name="Jane",
        last_name="Doe",
        email="jane.doe@example.com",
        phone="5551234567",
        city="Austin",
        state="TX",
        ip_address="203.0.113.7",
    )


@pytest.fixture
def gateway_secrets() -> GatewaySecrets:
    """Secrets with provider credentials and an inbound key configured."""
    return GatewaySecrets(
        provider_api_key="provider-key",
        provider_username="provider-user",
        provider_password="provider-pass",
        proxy_api_key=TEST_API_KEY,
    )


@pytest.fixture
def mock_gateway(sample_contact: ContactRecord) -> AsyncMock:
    """Create a mock enrichment gateway."""
    gateway = AsyncMock()
    gateway.lookup.return_value = sample_contact
    gateway.lookup_batch.return_value = [
        BatchItem(ip_address="203.0.113.7", status="found", record=sample_contact),
        BatchItem(ip_address="198.51.100.2", status="not_found", message="No data"),
    ]
    gateway.probe.return_value = {"Data": [], "Count": 0}
    gateway.forward.return_value = {"Data": [], "Count": 0, "Echo": True}
    return gateway


@pytest.fixture
def mock_app_state(
    mock_gateway: AsyncMock,
    gateway_secrets: GatewaySecrets,
) -> MagicMock:
    """Create mock app state with the mock gateway."""
    mock_state = MagicMock()
    mock_state.gateway = mock_gateway
    mock_state.secrets = gateway_secrets
    mock_state.uptime_seconds = 123.45
    mock_state.uptime_formatted = "2m 3s"
    return mock_state


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers carrying the valid inbound API key."""
    return {"x-api-key": TEST_API_KEY}


@pytest.fixture
def test_client(mock_app_state: MagicMock) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    # Local imports required to avoid import order issues with config
    from fastapi.middleware.cors import CORSMiddleware  # noqa: PLC0415

    from append_gateway.config import get_settings  # noqa: PLC0415
    from append_gateway.core.exceptions import register_exception_handlers  # noqa: PLC0415
    from append_gateway.routers import append, diagnostics, health, info  # noqa: PLC0415

    # Create a minimal lifespan that does nothing
    @asynccontextmanager
    async def mock_lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield

    settings = get_settings()

    app = FastAPI(
        title=f"{settings.service.name} Service",
        version=settings.service.version,
        lifespan=mock_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Operations"])
    app.include_router(info.router, tags=["Operations"])
    app.include_router(append.router, tags=["Enrichment"])
    app.include_router(diagnostics.router, tags=["Diagnostics"])

    # Patch get_app_state to return our mock
    with (
        patch("append_gateway.core.state.get_app_state", return_value=mock_app_state),
        patch("append_gateway.core.auth.get_app_state", return_value=mock_app_state),
        patch("append_gateway.routers.health.get_app_state", return_value=mock_app_state),
        patch("append_gateway.routers.info.get_app_state", return_value=mock_app_state),
        patch("append_gateway.routers.append.get_app_state", return_value=mock_app_state),
        patch("append_gateway.routers.diagnostics.get_app_state", return_value=mock_app_state),
        TestClient(app) as client,
    ):
        yield client
