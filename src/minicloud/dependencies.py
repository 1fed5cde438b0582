"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from minicloud.orchestration.base import KubernetesOrchestrator
from minicloud.services.app_service import AppService
from minicloud.services.database_service import DatabaseService
from minicloud.services.resource_locks import ResourceLockRegistry


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_orchestrator(request: Request) -> KubernetesOrchestrator:
    return request.app.state.orchestrator


def get_resource_locks(request: Request) -> ResourceLockRegistry:
    return request.app.state.resource_locks


def get_database_service(
    db: AsyncSession = Depends(get_db),
    orchestrator: KubernetesOrchestrator = Depends(get_orchestrator),
    locks: ResourceLockRegistry = Depends(get_resource_locks),
) -> DatabaseService:
    return DatabaseService(db, orchestrator, locks)


def get_app_service(
    db: AsyncSession = Depends(get_db),
    orchestrator: KubernetesOrchestrator = Depends(get_orchestrator),
    locks: ResourceLockRegistry = Depends(get_resource_locks),
) -> AppService:
    return AppService(db, orchestrator, locks)


# Type aliases for dependency injection
DatabaseServiceDep = Annotated[DatabaseService, Depends(get_database_service)]
AppServiceDep = Annotated[AppService, Depends(get_app_service)]
