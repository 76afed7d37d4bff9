"""FastAPI application factory for statuswatch."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from statuswatch import __version__
from statuswatch.api.routes import status
from statuswatch.api.snapshot import SnapshotCache
from statuswatch.config.loader import load_catalog
from statuswatch.config.models import StatusWatchConfig
from statuswatch.status.registry import ServiceRegistry
from statuswatch.status.resolver import validate_catalog

logger = logging.getLogger(__name__)


def create_app(config: StatusWatchConfig | None = None) -> FastAPI:
    app = FastAPI(
        title="statuswatch",
        version=__version__,
        description="Normalized status of third-party services",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    if config is None:
        config = load_catalog()
    errors = validate_catalog(config.services)
    if errors:
        raise ValueError("Invalid service catalog:\n" + "\n".join(errors))
    logger.info("Serving status for %d services", len(config.services))

    registry = ServiceRegistry(config)
    app.state.config = config
    app.state.registry = registry
    app.state.snapshots = SnapshotCache(registry.collect, ttl=config.api.cache_ttl)

    @app.get("/health", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(status.router, prefix="/api")
    return app


def get_app() -> FastAPI:
    """Factory used by ``uvicorn --factory``."""
    return create_app()
