"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.routes import health
from api.routes.v1 import assessments, candidates, jobs
from core.config import Settings, settings
from core.middleware import (
    SimulatedTransportMiddleware,
    SimulationPolicy,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)
from database.seed import ensure_seed_data
from database.store import EntityStore

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[EntityStore] = None,
    policy: Optional[SimulationPolicy] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the simulated backend.

    Args:
        store: Entity store; a fresh in-memory one by default
        policy: Latency / failure policy; built from settings by default
        app_settings: Settings override, mainly for tests

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings
    store = store or EntityStore(app_settings.database_url)
    policy = policy or SimulationPolicy.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        logger.info(f"Starting {app_settings.app_name} in {app_settings.app_env} environment")
        await store.init()
        if app_settings.seed_on_startup:
            await ensure_seed_data(
                store,
                job_count=app_settings.seed_job_count,
                candidate_count=app_settings.seed_candidate_count,
            )

        yield

        logger.info(f"Shutting down {app_settings.app_name}")
        await store.close()

    app = FastAPI(
        title=app_settings.app_name,
        description="Simulated applicant-tracking backend",
        version="0.1.0",
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.simulation = policy
    app.state.settings = app_settings

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Add middleware (order matters - they execute in reverse order)
    # 1. Simulated transport (innermost - a failed write never reaches a route)
    app.add_middleware(SimulatedTransportMiddleware, policy=policy)

    # 2. Structured logging (outermost - sees injected failures too)
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=app_settings.log_request_body,
        max_body_size=app_settings.log_max_body_size,
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    app.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
    app.include_router(candidates.router, prefix="/candidates", tags=["Candidates"])
    app.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])

    return app


# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

app = create_app()
