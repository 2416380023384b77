"""
Application lifecycle management.

Handles startup (secrets, provider client, gateway) and shutdown (cleanup)
events for proper resource management.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from append_gateway.adapters import get_schema
from append_gateway.clients import ProviderClient
from append_gateway.config import get_safe_config, get_settings, load_secrets_from_environment
from append_gateway.core.state import init_app_state
from append_gateway.logging import get_logger, setup_logging
from append_gateway.services import EnrichmentGateway

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """
    Manage application lifecycle.

    Startup:
    - Initialize logging
    - Initialize application state
    - Read secrets from the environment (once)
    - Create the provider client and enrichment gateway
    - Log startup information

    Shutdown:
    - Log shutdown with uptime
    - Close the provider client
    """
    # === STARTUP ===
    settings = get_settings()

    # Initialize logging first
    setup_logging(settings.server.log_level, settings.service.name)
    logger = get_logger()

    state = init_app_state()

    logger.debug("Loaded configuration", extra={"config": get_safe_config()})

    logger.info(
        "Service starting",
        extra={
            "service": settings.service.name,
            "version": settings.service.version,
            "host": settings.server.host,
            "port": settings.server.port,
        },
    )

    state.secrets = load_secrets_from_environment()
    config_flags = state.secrets.presence_flags()
    if not config_flags["providerCredentials"]:
        logger.warning(
            "Provider credentials missing; lookups will fail until configured",
            extra=config_flags,
        )
    if not config_flags["proxyApiKey"]:
        logger.warning("Inbound API key missing; protected endpoints will return 500")

    schema = get_schema(settings.provider.schema_version)

    logger.info(
        "Initializing provider client",
        extra={
            "endpoint_url": settings.provider.endpoint_url,
            "schema": schema.name,
            "append_type": settings.provider.append_type,
            "timeout": settings.provider.timeout_seconds,
        },
    )

    state.provider_client = ProviderClient(
        url=settings.provider.endpoint_url,
        timeout=settings.provider.timeout_seconds,
        service_name="provider",
    )

    state.gateway = EnrichmentGateway(
        client=state.provider_client,
        schema=schema,
        secrets=state.secrets,
        append_type=settings.provider.append_type,
        max_batch_size=settings.batch.max_ip_addresses,
    )

    logger.info("Service ready to accept requests")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info(
        "Service shutting down",
        extra={
            "uptime_seconds": state.uptime_seconds,
            "uptime": state.uptime_formatted,
        },
    )

    await state.provider_client.close()

    logger.info("Service shutdown complete")
