"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minicloud.config import settings
from minicloud.db.engine import create_db_engine, create_session_factory
from minicloud.logging_config import configure_logging
from minicloud.orchestration.kubectl import KubectlOrchestrator
from minicloud.services.resource_locks import ResourceLockRegistry

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=not settings.local_mode)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    engine = create_db_engine()

    from minicloud.db.base import Base
    import minicloud.db.models  # noqa: F401: register all ORM models

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)

    db_url = settings.effective_database_url
    logger.info(
        "MiniCloud control plane started (db=%s, kubectl=%s)",
        "sqlite" if "sqlite" in db_url else "postgresql",
        settings.kubectl_bin,
    )
    yield

    await engine.dispose()
    logger.info("MiniCloud control plane shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="MiniCloud Control Plane",
        version="0.1.0",
        description="Provisions databases and apps on Kubernetes and tracks their lifecycle.",
        lifespan=lifespan,
    )

    # Shared across requests: one lock registry, one orchestrator
    app.state.orchestrator = KubectlOrchestrator.from_settings(settings)
    app.state.resource_locks = ResourceLockRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from minicloud.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    from minicloud.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from minicloud.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
