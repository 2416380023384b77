"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from append_gateway.config import get_settings
from append_gateway.core.auth import API_KEY_HEADER
from append_gateway.core.exceptions import register_exception_handlers
from append_gateway.core.lifespan import lifespan
from append_gateway.routers import append, diagnostics, health, info


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    # Load settings (validates configuration)
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.service.name} Service",
        description="Gateway to a reverse IP append enrichment provider",
        version=settings.service.version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", API_KEY_HEADER],
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Operations"])
    app.include_router(info.router, tags=["Operations"])
    app.include_router(append.router, tags=["Enrichment"])
    app.include_router(diagnostics.router, tags=["Diagnostics"])

    return app
