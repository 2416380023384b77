"""
Inbound API key check for enrichment endpoints.
"""

from __future__ import annotations

import secrets

from fastapi import Header

from append_gateway.core.exceptions import GatewayConfigurationError, UnauthorizedError
from append_gateway.core.state import get_app_state
from append_gateway.logging import get_logger

API_KEY_HEADER = "x-api-key"


def check_api_key(supplied: str | None, expected: str | None) -> None:
    """
    Compare a caller key against the configured one.

    Raises:
        GatewayConfigurationError: No expected key configured on the server
        UnauthorizedError: Key missing or different
    """
    if expected is None:
        raise GatewayConfigurationError("Inbound API key is not configured")
    if supplied is None:
        raise UnauthorizedError(f"Missing {API_KEY_HEADER} header")
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise UnauthorizedError("Invalid API key")


# nosemgrep: no-default-parameter-values (FastAPI header declaration)
async def require_api_key(
    x_api_key: str | None = Header(default=None, alias=API_KEY_HEADER),
) -> None:
    """FastAPI dependency guarding endpoints that reach the provider."""
    state = get_app_state()
    try:
        check_api_key(x_api_key, state.secrets.proxy_api_key)
    except UnauthorizedError:
        get_logger().warning(
            "Rejected request with bad API key",
            extra={"key_present": x_api_key is not None},
        )
        raise
