"""Tests for resource record repositories."""

from datetime import datetime, timedelta, timezone

import pytest

from minicloud.repositories.app_instance_repo import AppInstanceRepository
from minicloud.repositories.database_instance_repo import DatabaseInstanceRepository


@pytest.mark.asyncio
async def test_find_current_returns_latest_row(db_session):
    repo = AppInstanceRepository(db_session)
    now = datetime.now(timezone.utc)
    await repo.create(
        namespace="demo", name="hello", image="nginx:1", port=80, replicas=1,
        status="DELETED", created_at=now - timedelta(minutes=5),
    )
    await repo.create(
        namespace="demo", name="hello", image="nginx:2", port=80, replicas=1,
        status="READY", created_at=now,
    )
    await db_session.commit()

    current = await repo.find_current("demo", "hello")
    assert current.image == "nginx:2"
    history = await repo.list_history("demo", "hello")
    assert [r.image for r in history] == ["nginx:1", "nginx:2"]


@pytest.mark.asyncio
async def test_identity_is_scoped_by_namespace(db_session):
    repo = DatabaseInstanceRepository(db_session)
    await repo.create(namespace="demo", name="pg-main", status="READY")
    await db_session.commit()

    assert await repo.exists("demo", "pg-main")
    assert not await repo.exists("other", "pg-main")
    assert await repo.find_current("other", "pg-main") is None


@pytest.mark.asyncio
async def test_update_persists_fields(db_session):
    repo = DatabaseInstanceRepository(db_session)
    row = await repo.create(namespace="demo", name="pg-main", status="PROVISIONING")
    await repo.update(row, status="READY", secret_name="pg-main-conn")
    await db_session.commit()

    current = await repo.find_current("demo", "pg-main")
    assert current.status == "READY"
    assert current.secret_name == "pg-main-conn"
