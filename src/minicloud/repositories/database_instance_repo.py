"""Database instance repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from minicloud.db.models.database_instance import DatabaseInstanceRow
from minicloud.repositories.base import BaseRepository


class DatabaseInstanceRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, DatabaseInstanceRow)
