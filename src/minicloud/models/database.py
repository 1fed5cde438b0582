"""Pydantic models for the Database resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from minicloud.models.enums import ProvisioningStatus


class DatabaseCreate(BaseModel):
    """Request body for creating a database (server assigns status + timestamps)."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=63)
    namespace: str = Field(..., min_length=1, max_length=63)


class DatabaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    namespace: str
    status: ProvisioningStatus
    secret_name: str | None = None
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
