"""Tests for the database provisioning lifecycle.

Covers:
- success path ends READY with the connection secret name
- duplicate identity raises ResourceAlreadyExistsError without a new row
- kubectl unavailable persists FAILED and raises OrchestratorUnavailableError
- generic failure persists FAILED and returns the record
- malformed names are rejected before any row or orchestrator call
- concurrent creates of the same identity: exactly one succeeds
"""

import asyncio

import pytest

from minicloud.errors.exceptions import (
    NotFoundError,
    OrchestratorUnavailableError,
    ResourceAlreadyExistsError,
    ValidationError,
)
from minicloud.orchestration.base import FailureKind
from minicloud.repositories.database_instance_repo import DatabaseInstanceRepository
from minicloud.services.database_service import DatabaseService


@pytest.fixture
def service(db_session, orchestrator, locks):
    return DatabaseService(db_session, orchestrator, locks)


@pytest.mark.asyncio
async def test_create_ready(service, orchestrator, locks):
    row = await service.create("demo", "pg-main")

    assert row.status == "READY"
    assert row.secret_name == "pg-main-conn"
    assert row.message is None
    assert [op for op, _ in orchestrator.calls] == ["provision_database"]
    spec = orchestrator.calls[0][1]
    assert (spec.name, spec.namespace) == ("pg-main", "demo")
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_create_duplicate_rejected(service, db_session, orchestrator):
    await service.create("demo", "pg-main")

    with pytest.raises(ResourceAlreadyExistsError):
        await service.create("demo", "pg-main")

    history = await DatabaseInstanceRepository(db_session).list_history("demo", "pg-main")
    assert len(history) == 1
    assert len(orchestrator.calls) == 1


@pytest.mark.asyncio
async def test_duplicate_after_failure_still_rejected(service, orchestrator):
    orchestrator.fail_with("database", FailureKind.COMMAND_FAILED, "pod never became ready")
    await service.create("demo", "pg-main")

    with pytest.raises(ResourceAlreadyExistsError):
        await service.create("demo", "pg-main")


@pytest.mark.asyncio
async def test_same_name_in_other_namespace_allowed(service):
    await service.create("demo", "pg-main")
    row = await service.create("staging", "pg-main")
    assert row.status == "READY"


@pytest.mark.asyncio
async def test_tool_unavailable_persists_failed_and_raises(service, orchestrator, session_factory):
    orchestrator.fail_with("database", FailureKind.TOOL_UNAVAILABLE, "kubectl unreachable")

    with pytest.raises(OrchestratorUnavailableError) as exc_info:
        await service.create("demo", "pg-main")
    assert exc_info.value.status_code == 503

    # Visible from an independent session: the FAILED write was committed.
    async with session_factory() as other:
        row = await DatabaseInstanceRepository(other).find_current("demo", "pg-main")
    assert row.status == "FAILED"
    assert row.message == "kubectl unreachable"
    assert row.secret_name is None


@pytest.mark.asyncio
async def test_generic_failure_returns_failed_record(service, orchestrator):
    orchestrator.fail_with("database", FailureKind.COMMAND_FAILED, "timed out waiting for the condition")

    row = await service.create("demo", "pg-main")

    assert row.status == "FAILED"
    assert row.message == "timed out waiting for the condition"
    assert row.secret_name is None


@pytest.mark.asyncio
async def test_unexpected_orchestrator_error_still_marks_failed(service, orchestrator, session_factory):
    def explode(spec):
        raise RuntimeError("disk full")

    orchestrator.provision_database = explode

    with pytest.raises(RuntimeError):
        await service.create("demo", "pg-main")

    async with session_factory() as other:
        row = await DatabaseInstanceRepository(other).find_current("demo", "pg-main")
    assert row.status == "FAILED"
    assert row.message == "disk full"


@pytest.mark.asyncio
@pytest.mark.parametrize("namespace,name", [("Demo", "pg-main"), ("demo", "pg_main"), ("demo", "-pg")])
async def test_invalid_identity_rejected_without_side_effects(
    service, orchestrator, db_session, namespace, name
):
    with pytest.raises(ValidationError):
        await service.create(namespace, name)
    assert orchestrator.calls == []
    assert not await DatabaseInstanceRepository(db_session).exists(namespace, name)


@pytest.mark.asyncio
async def test_get_returns_current_record(service):
    await service.create("demo", "pg-main")
    row = await service.get("demo", "pg-main")
    assert row.status == "READY"


@pytest.mark.asyncio
async def test_get_missing_raises_not_found(service):
    with pytest.raises(NotFoundError):
        await service.get("demo", "missing")


@pytest.mark.asyncio
async def test_concurrent_creates_only_one_succeeds(session_factory, orchestrator, locks):
    orchestrator.delay_seconds = 0.05

    async def attempt():
        async with session_factory() as session:
            return await DatabaseService(session, orchestrator, locks).create("demo", "pg-main")

    results = await asyncio.gather(attempt(), attempt(), return_exceptions=True)

    ready = [r for r in results if not isinstance(r, Exception)]
    conflicts = [r for r in results if isinstance(r, ResourceAlreadyExistsError)]
    assert len(ready) == 1
    assert len(conflicts) == 1
    assert ready[0].status == "READY"
    assert len(orchestrator.calls) == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_cancelled_create_marks_failed(service, orchestrator, locks, session_factory):
    orchestrator.delay_seconds = 0.3

    task = asyncio.create_task(service.create("demo", "pg-main"))
    await asyncio.sleep(0.1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    # let the worker thread finish
    await asyncio.sleep(0.3)

    async with session_factory() as other:
        row = await DatabaseInstanceRepository(other).find_current("demo", "pg-main")
    assert row.status == "FAILED"
    assert row.message == "Operation cancelled before completion"
    assert len(locks) == 0

    # FAILED is settled: a retry sees an existing record, not a stuck one
    orchestrator.delay_seconds = 0.0
    with pytest.raises(ResourceAlreadyExistsError):
        await service.create("demo", "pg-main")


@pytest.mark.asyncio
async def test_history_lists_all_records(service, db_session):
    await service.create("demo", "pg-main")

    rows = await service.history("demo", "pg-main")
    assert [r.status for r in rows] == ["READY"]

    with pytest.raises(NotFoundError):
        await service.history("demo", "nope")
