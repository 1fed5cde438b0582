"""AppInstance table."""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from minicloud.db.base import Base, TimestampMixin
from minicloud.models.enums import ProvisioningStatus


class AppInstanceRow(Base, TimestampMixin):
    __tablename__ = "app_instances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(63), nullable=False)
    namespace: Mapped[str] = mapped_column(String(63), nullable=False)
    image: Mapped[str] = mapped_column(String(512), nullable=False)
    port: Mapped[int] = mapped_column(Integer, nullable=False)
    replicas: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    ready_replicas: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    database_ref: Mapped[str | None] = mapped_column(String(63), nullable=True)
    access_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProvisioningStatus.REQUESTED.value
    )
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_app_instances_namespace_name", "namespace", "name"),
    )
