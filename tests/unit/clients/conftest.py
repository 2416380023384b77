"""Fixtures for client unit tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from tests.factories import PROVIDER_URL

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from append_gateway.clients.provider import ProviderClient


def build_response(status_code: int, body: object = None, text: str = "") -> MagicMock:
    """
    Create a mock httpx response.

    A ``None`` body makes ``json()`` fail the way a non-JSON payload does.
    """
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.text = text
    if body is None:
        response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    else:
        response.json.return_value = body

    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}",
            request=MagicMock(),
            response=response,
        )
    else:
        response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory fixture for mock httpx responses."""
    return build_response


@pytest.fixture
def mock_httpx_client() -> AsyncMock:
    """Create a mock httpx.AsyncClient for testing client methods."""
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
async def provider_client(mock_httpx_client: AsyncMock) -> AsyncGenerator[ProviderClient, None]:
    """Create a ProviderClient with a mocked httpx client."""
    from append_gateway.clients.provider import ProviderClient  # noqa: PLC0415

    client = ProviderClient(
        url=PROVIDER_URL,
        timeout=30.0,
        service_name="provider",
    )
    # Replace the internal httpx client with our mock
    client.client = mock_httpx_client
    yield client
