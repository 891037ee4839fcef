"""depaudit REST API — FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from depaudit.api.deps import init_services, shutdown_services
from depaudit.api.errors import register_error_handlers
from depaudit.api.middleware.request_id import RequestContextMiddleware
from depaudit.api.routers import reports, scans
from depaudit.api.schemas.scan import HealthResponse
from depaudit.core.config import Settings
from depaudit.core.logging import setup_logging
from depaudit.engines.scanner.scanner import utc_timestamp


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: HTTP client + services. Shutdown: close client, drop timers."""
        init_services(settings)
        yield
        await shutdown_services()

    app = FastAPI(
        title="depaudit",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.get("/api/health", tags=["ops"], response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="OK", timestamp=utc_timestamp())

    app.include_router(scans.router, prefix="/api", tags=["scans"])
    app.include_router(reports.router, prefix="/api", tags=["reports"])

    return app
