"""Pydantic models for the App resource."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from minicloud.models.enums import ProvisioningStatus


class AppCreate(BaseModel):
    """Request body for creating an app.

    ``databaseRef`` names a database in the same namespace whose connection
    secret is wired into the app's environment.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=63)
    namespace: str = Field(..., min_length=1, max_length=63)
    image: str = Field(..., min_length=1, max_length=512)
    port: int = Field(..., ge=1, le=65535)
    replicas: int = Field(default=1, ge=1)
    database_ref: str | None = Field(None, min_length=1, max_length=63)


class AppResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    namespace: str
    image: str
    port: int
    status: ProvisioningStatus
    replicas: int
    ready_replicas: int = 0
    access_url: str | None = None
    database_ref: str | None = None
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
