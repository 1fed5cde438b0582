"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from minicloud.api.routes import apps, databases, health

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(databases.router)
api_router.include_router(apps.router)
