"""Shared test fixtures."""

import time

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from minicloud.db.base import Base
# Import all models to register with Base.metadata
import minicloud.db.models  # noqa: F401
from minicloud.orchestration.base import (
    AppProvisionResult,
    DatabaseProvisionResult,
    FailureKind,
    KubernetesOrchestrator,
    OrchestrationOutcome,
)
from minicloud.services.resource_locks import ResourceLockRegistry


class FakeOrchestrator(KubernetesOrchestrator):
    """In-memory orchestrator recording calls and returning scripted outcomes."""

    def __init__(self):
        self.calls: list[tuple[str, object]] = []
        self.database_outcome = None
        self.app_outcome = None
        self.delete_outcome = None
        self.delay_seconds = 0.0

    def fail_with(self, operation: str, kind: FailureKind, message: str) -> None:
        setattr(self, f"{operation}_outcome", OrchestrationOutcome.failed(kind, message))

    def provision_database(self, spec):
        self._record("provision_database", spec)
        return self.database_outcome or OrchestrationOutcome.success(
            DatabaseProvisionResult(secret_name=f"{spec.name}-conn")
        )

    def provision_app(self, spec):
        self._record("provision_app", spec)
        return self.app_outcome or OrchestrationOutcome.success(
            AppProvisionResult(
                access_url=f"http://{spec.name}.{spec.namespace}.local",
                ready_replicas=spec.replicas,
            )
        )

    def delete_app(self, spec):
        self._record("delete_app", spec)
        return self.delete_outcome or OrchestrationOutcome.success(None)

    def _record(self, operation, spec):
        self.calls.append((operation, spec))
        if self.delay_seconds:
            time.sleep(self.delay_seconds)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def orchestrator():
    return FakeOrchestrator()


@pytest.fixture
def locks():
    return ResourceLockRegistry()


@pytest.fixture
def app(db_engine, session_factory, orchestrator, locks):
    """Create a test application instance with in-memory DB and fake orchestrator."""
    from minicloud.main import create_app

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.orchestrator = orchestrator
    _app.state.resource_locks = locks
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
