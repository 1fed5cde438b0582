"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from minicloud.db.models.app_instance import AppInstanceRow
from minicloud.db.models.database_instance import DatabaseInstanceRow

__all__ = ["AppInstanceRow", "DatabaseInstanceRow"]
