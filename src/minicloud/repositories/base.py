"""Base repository with common CRUD operations."""

from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from minicloud.db.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository:
    """Generic async repository for resource records keyed by (namespace, name).

    Several rows may share an identity; the current one is the most recently
    created.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]):
        self.session = session
        self.model_class = model_class

    async def create(self, **kwargs: Any) -> T:
        """Insert and flush a new record."""
        row = self.model_class(**kwargs)
        self.session.add(row)
        await self.session.flush()
        return row

    async def update(self, row: T, **kwargs: Any) -> T:
        """Update an existing record."""
        for key, value in kwargs.items():
            setattr(row, key, value)
        await self.session.flush()
        return row

    async def find_current(self, namespace: str, name: str) -> T | None:
        """Latest row by creation time for the identity, or None."""
        model = self.model_class
        stmt = (
            select(model)
            .where(model.namespace == namespace, model.name == name)
            .order_by(model.created_at.desc(), model.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, namespace: str, name: str) -> bool:
        """True if any row (current or historical) exists for the identity."""
        model = self.model_class
        stmt = select(model.id).where(model.namespace == namespace, model.name == name).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list_history(self, namespace: str, name: str) -> list[T]:
        """All rows for the identity, oldest first."""
        model = self.model_class
        stmt = (
            select(model)
            .where(model.namespace == namespace, model.name == name)
            .order_by(model.created_at.asc(), model.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
