"""
Service information endpoint.

Exposes service identity and provider integration settings.
"""

from __future__ import annotations

from fastapi import APIRouter

from append_gateway.config import get_safe_config, get_settings
from append_gateway.core.state import get_app_state
from append_gateway.schemas import InfoResponse, ProviderInfo

router = APIRouter()


@router.get("/info", response_model=InfoResponse)
async def get_info() -> InfoResponse:
    """
    Get service information and configuration.

    Returns:
        Service metadata, uptime, and provider settings (no secrets)
    """
    settings = get_settings()
    state = get_app_state()

    return InfoResponse(
        service=settings.service.name,
        version=settings.service.version,
        uptime_seconds=round(state.uptime_seconds, 3),
        uptime=state.uptime_formatted,
        provider=ProviderInfo(**get_safe_config()["provider"]),
        max_batch_size=settings.batch.max_ip_addresses,
    )
