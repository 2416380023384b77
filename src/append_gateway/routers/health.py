"""
Health check endpoint.

Reports whether the settings the gateway needs are present, as booleans
only. Unauthenticated: it reveals neither secrets nor business data.
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter

from append_gateway.config import get_settings
from append_gateway.core.state import get_app_state
from append_gateway.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Check service health.

    Returns:
        Status, current UTC timestamp, and configuration presence flags
    """
    settings = get_settings()
    state = get_app_state()

    config_flags = state.secrets.presence_flags()
    config_flags["providerEndpointUrl"] = bool(settings.provider.endpoint_url)

    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        config_flags=config_flags,
    )
