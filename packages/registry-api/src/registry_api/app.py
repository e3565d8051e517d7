# SPDX-License-Identifier: MIT
"""FastAPI application factory.

Serve with ``registry serve`` or ``uvicorn --factory registry_api.app:create_app``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import APIConfig
from .models.responses import HealthResponse
from .storage import VersionCatalog, create_catalog
from .version import BuildVersion, build_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    catalog: VersionCatalog = app.state.catalog
    logger.info(
        f"Serving providers from {catalog.name} catalog",
        extra={"context": {"backend": catalog.name}},
    )

    yield

    catalog.close()


def create_app(
    config: APIConfig | None = None,
    catalog: VersionCatalog | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: API configuration. If None, loads from environment.
        catalog: Version catalog to serve. If None, one is built from
            ``config.storage``.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = APIConfig.from_env()
    if catalog is None:
        catalog = create_catalog(config.storage)

    app = FastAPI(
        title=config.title,
        description=config.description,
        version=config.version,
        debug=config.debug,
        docs_url=config.docs_url,
        openapi_url=config.openapi_url,
        lifespan=lifespan,
    )

    # Store config and catalog in app state
    app.state.config = config
    app.state.catalog = catalog

    # Add error handling middleware
    from .middleware.errors import add_error_handlers

    add_error_handlers(app)

    # Register API routes
    from .routes import discovery, providers

    app.include_router(discovery.router, tags=["discovery"])
    app.include_router(providers.router, prefix=config.api_prefix.rstrip("/"), tags=["providers"])

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse()

    @app.get("/version", response_model=BuildVersion)
    def version() -> BuildVersion:
        """Build information of the running server."""
        return build_version()

    return app
