"""FastAPI application for the skillreg web service.

Provides REST API endpoints wrapping the skillreg package for:
- Publishing and validating skill manifests
- Listing and keyword search, with broker fallback
- Resolving manifests anchored on the ledger
- Registry status

Run with ``uvicorn web.backend.app.main:create_app --factory``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skillreg import __version__
from skillreg.config import RegistryConfig
from skillreg.registry.seed import seed_marketplace_skills
from skillreg.registry.service import SkillRegistry, build_registry
from skillreg.utils.log import configure_logging

from web.backend.app.routers import registry as registry_router
from web.backend.app.routers import skills


def create_app(
    registry: Optional[SkillRegistry] = None,
    config: Optional[RegistryConfig] = None,
) -> FastAPI:
    """Build the application around one explicitly constructed registry.

    When ``registry`` is omitted one is built from ``config`` (or the
    environment) and seeded with the marketplace's own skills if enabled.
    """
    config = config or RegistryConfig.from_env()
    configure_logging(config.log_level)

    if registry is None:
        registry = build_registry(config)
        if config.seed_skills:
            seed_marketplace_skills(registry)

    app = FastAPI(
        title="skillreg API",
        description=(
            "REST API for the skill registry. "
            "Provides endpoints for publishing, validating, discovering, "
            "and resolving agent skill manifests."
        ),
        version=__version__,
    )
    app.state.registry = registry
    app.state.config = config

    # -----------------------------------------------------------------------
    # CORS middleware (allow all origins for development)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(skills.router)
    app.include_router(registry_router.router)

    @app.get("/", tags=["meta"])
    async def root():
        """Return basic API information."""
        return {
            "name": "skillreg API",
            "version": __version__,
            "description": "Skill registry REST API",
            "docs": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "published_count": app.state.registry.published_count(),
        }

    return app
