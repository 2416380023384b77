"""HTTP clients for upstream services."""

from append_gateway.clients.base import BackendClient
from append_gateway.clients.provider import ProviderClient

__all__ = [
    "BackendClient",
    "ProviderClient",
]
