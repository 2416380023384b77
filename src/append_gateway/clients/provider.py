"""
Client for the reverse IP append provider.
"""

from __future__ import annotations

from typing import Any

from append_gateway.clients.base import BackendClient


class ProviderClient(BackendClient):
    """
    Client for the enrichment provider's append endpoint.

    Payload shape is the caller's concern (see append_gateway.adapters);
    this class only moves JSON over the wire.
    """

    async def append(self, payload: dict[str, Any]) -> Any:
        """
        Submit one append request.

        Args:
            payload: Provider request body, credentials included

        Returns:
            Raw decoded provider reply
        """
        return await self._post_json(payload)
