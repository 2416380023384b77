"""
Application state management.

Tracks runtime state like uptime, and holds the objects built once at
startup: secrets, the provider client, and the enrichment gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from append_gateway.clients import ProviderClient
    from append_gateway.config import GatewaySecrets
    from append_gateway.services import EnrichmentGateway


@dataclass
class AppState:
    """
    Runtime application state.

    Attributes:
        start_time: When the application started (UTC)
        _secrets: Credentials read from the environment at startup (internal)
        _provider_client: HTTP client for the enrichment provider (internal)
        _gateway: Enrichment gateway bound to the client and secrets (internal)
    """

    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    _secrets: GatewaySecrets | None = field(default=None, repr=False)
    _provider_client: ProviderClient | None = field(default=None, repr=False)
    _gateway: EnrichmentGateway | None = field(default=None, repr=False)

    @property
    def secrets(self) -> GatewaySecrets:
        """Get the gateway secrets. Raises RuntimeError if not loaded."""
        if self._secrets is None:
            raise RuntimeError("Secrets not loaded")
        return self._secrets

    @secrets.setter
    def secrets(self, value: GatewaySecrets) -> None:
        """Set the gateway secrets."""
        self._secrets = value

    @property
    def provider_client(self) -> ProviderClient:
        """Get the provider client. Raises RuntimeError if not initialized."""
        if self._provider_client is None:
            raise RuntimeError("Provider client not initialized")
        return self._provider_client

    @provider_client.setter
    def provider_client(self, value: ProviderClient) -> None:
        """Set the provider client."""
        self._provider_client = value

    @property
    def gateway(self) -> EnrichmentGateway:
        """Get the enrichment gateway. Raises RuntimeError if not initialized."""
        if self._gateway is None:
            raise RuntimeError("Enrichment gateway not initialized")
        return self._gateway

    @gateway.setter
    def gateway(self, value: EnrichmentGateway) -> None:
        """Set the enrichment gateway."""
        self._gateway = value

    @property
    def uptime_seconds(self) -> float:
        """Calculate uptime in seconds."""
        now = datetime.now(UTC)
        delta = now - self.start_time
        return delta.total_seconds()

    @property
    def uptime_formatted(self) -> str:
        """
        Format uptime as human-readable string.

        Returns:
            String like "2d 3h 15m 42s" or "15m 42s"
        """
        seconds = int(self.uptime_seconds)
        days, remainder = divmod(seconds, 86400)
        hours, remainder = divmod(remainder, 3600)
        minutes, secs = divmod(remainder, 60)

        parts = []
        if days > 0:
            parts.append(f"{days}d")
        if hours > 0:
            parts.append(f"{hours}h")
        if minutes > 0:
            parts.append(f"{minutes}m")
        parts.append(f"{secs}s")

        return " ".join(parts)


# Global application state instance
# Initialized in lifespan context
_app_state: AppState | None = None


def get_app_state() -> AppState:
    """
    Get the current application state.

    Raises:
        RuntimeError: If called before app startup
    """
    if _app_state is None:
        raise RuntimeError("Application state not initialized")
    return _app_state


def init_app_state() -> AppState:
    """Initialize application state. Called during startup."""
    # nosemgrep: config.semgrep.python.no-noqa-for-typing
    global _app_state  # noqa: PLW0603 - intentional singleton pattern
    _app_state = AppState()
    return _app_state


def reset_app_state() -> None:
    """Reset application state. Used in testing."""
    # nosemgrep: config.semgrep.python.no-noqa-for-typing
    global _app_state  # noqa: PLW0603 - intentional singleton pattern
    _app_state = None
