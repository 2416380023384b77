"""API routers for the gateway service."""

from append_gateway.routers import append, diagnostics, health, info

__all__ = ["append", "diagnostics", "health", "info"]
