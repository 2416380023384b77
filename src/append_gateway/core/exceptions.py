"""
Error taxonomy and exception handlers for consistent error responses.

Every failure a request can hit is a ServiceError subclass and renders as
``{"error": ..., "message": ..., "details": ...}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from service_commons.exceptions import ServiceError, create_exception_handlers
from service_commons.exceptions import (
    register_exception_handlers as register_common_exception_handlers,
)

from append_gateway.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI

__all__ = [
    "ClientDisconnectedError",
    "GatewayConfigurationError",
    "InvalidInputError",
    "NotFoundError",
    "ServiceError",
    "UnauthorizedError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "register_exception_handlers",
]


class InvalidInputError(ServiceError):
    """The caller sent a request the gateway cannot act on."""

    # nosemgrep: no-default-parameter-values (optional details for exceptions)
    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__("invalid_input", message, 400, details)


class UnauthorizedError(ServiceError):
    """Missing or wrong x-api-key header."""

    def __init__(self, message: str) -> None:
        super().__init__("unauthorized", message, 401, None)


class GatewayConfigurationError(ServiceError):
    """
    Server-side configuration is incomplete.

    Messages name the missing setting, never its value.
    """

    # nosemgrep: no-default-parameter-values (optional details for exceptions)
    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__("configuration_error", message, 500, details)


class NotFoundError(ServiceError):
    """The provider answered but had no usable contact record."""

    # nosemgrep: no-default-parameter-values (optional details for exceptions)
    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__("not_found", message, 404, details)


class UpstreamError(ServiceError):
    """
    The provider answered with an error status or an unreadable payload.

    Error statuses (4xx/5xx) are forwarded as-is; anything else maps to 502.
    """

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int,
        details: dict[str, object] | None,
    ) -> None:
        super().__init__(error, message, status_code, details)


class UpstreamUnavailableError(ServiceError):
    """The provider could not be reached (network error or timeout)."""

    # nosemgrep: no-default-parameter-values (optional details for exceptions)
    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__("upstream_unavailable", message, 502, details)


class ClientDisconnectedError(ServiceError):
    """The caller hung up before the lookup completed."""

    def __init__(self) -> None:
        super().__init__(
            "client_disconnected",
            "Client disconnected before the lookup completed",
            499,
            None,
        )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the app."""
    service_error_handler, validation_error_handler, unhandled_exception_handler = (
        create_exception_handlers(get_logger)
    )
    register_common_exception_handlers(
        app,
        ServiceError,
        service_error_handler,
        validation_error_handler,
        unhandled_exception_handler,
    )
