"""App instance repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from minicloud.db.models.app_instance import AppInstanceRow
from minicloud.repositories.base import BaseRepository


class AppInstanceRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, AppInstanceRow)
