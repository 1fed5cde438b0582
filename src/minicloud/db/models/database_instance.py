"""DatabaseInstance table."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minicloud.db.base import Base, TimestampMixin
from minicloud.models.enums import ProvisioningStatus


class DatabaseInstanceRow(Base, TimestampMixin):
    __tablename__ = "database_instances"

    # (namespace, name) is intentionally not unique: rows are history.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(63), nullable=False)
    namespace: Mapped[str] = mapped_column(String(63), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProvisioningStatus.REQUESTED.value
    )
    secret_name: Mapped[str | None] = mapped_column(String(253), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_database_instances_namespace_name", "namespace", "name"),
    )
