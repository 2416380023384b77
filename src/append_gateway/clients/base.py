"""
Base HTTP client for upstream JSON endpoints.

Provides standardized error handling for a single-attempt POST: transport
failures become UpstreamUnavailableError, error statuses become UpstreamError
with the upstream body attached verbatim. Nothing is retried.
"""

from __future__ import annotations

from typing import Any

import httpx

from append_gateway.core.exceptions import UpstreamError, UpstreamUnavailableError
from append_gateway.logging import get_logger


class BackendClient:
    """
    Base class for upstream service clients.

    Owns one httpx.AsyncClient for the lifetime of the application.
    """

    def __init__(
        self,
        url: str,
        timeout: float,
        service_name: str,
    ) -> None:
        """
        Initialize the client.

        Args:
            url: Full endpoint URL requests are posted to
            timeout: Request timeout in seconds
            service_name: Name of the upstream for logging and error messages
        """
        self.url = url
        self.timeout = timeout
        self.service_name = service_name

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def _decode_body(self, response: httpx.Response) -> object:
        """Upstream body as JSON when possible, raw text otherwise."""
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _post_json(self, payload: dict[str, Any]) -> Any:
        """
        POST a JSON payload once and return the decoded JSON reply.

        Args:
            payload: Request body

        Returns:
            Decoded JSON reply (object or array)

        Raises:
            UpstreamUnavailableError: Network error or timeout
            UpstreamError: Error status or non-JSON success body
        """
        logger = get_logger()

        try:
            response = await self.client.request("POST", self.url, json=payload)
            response.raise_for_status()
            return response.json()

        except ValueError as e:
            logger.warning(
                "Upstream returned invalid JSON",
                extra={"upstream": self.service_name},
            )
            raise UpstreamError(
                error="invalid_response",
                message=f"{self.service_name} returned a response that is not valid JSON",
                status_code=502,
                details={"upstream": self.service_name},
            ) from e

        except httpx.TimeoutException as e:
            logger.warning(
                "Upstream timeout",
                extra={"upstream": self.service_name, "timeout": self.timeout},
            )
            raise UpstreamUnavailableError(
                message=f"{self.service_name} timed out: {e}",
                details={
                    "upstream": self.service_name,
                    "timeout_seconds": self.timeout,
                    "error_type": type(e).__name__,
                },
            ) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = self._decode_body(e.response)
            logger.warning(
                "Upstream error status",
                extra={"upstream": self.service_name, "status_code": status},
            )
            raise UpstreamError(
                error="upstream_error",
                message=f"{self.service_name} returned HTTP {status}",
                status_code=status if 400 <= status <= 599 else 502,
                details={
                    "upstream": self.service_name,
                    "provider_status": status,
                    "provider_response": body,
                },
            ) from e

        except httpx.RequestError as e:
            logger.warning(
                "Upstream unavailable",
                extra={
                    "upstream": self.service_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise UpstreamUnavailableError(
                message=f"{self.service_name} is not reachable: {e}",
                details={"upstream": self.service_name, "error_type": type(e).__name__},
            ) from e
