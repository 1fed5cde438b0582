"""Database provisioning routes."""

from fastapi import APIRouter, Query

from minicloud.dependencies import DatabaseServiceDep
from minicloud.models.database import DatabaseCreate, DatabaseResponse

router = APIRouter(prefix="/databases", tags=["Databases"])


@router.post("", status_code=201, response_model=DatabaseResponse)
async def create_database(body: DatabaseCreate, service: DatabaseServiceDep) -> DatabaseResponse:
    row = await service.create(namespace=body.namespace, name=body.name)
    return DatabaseResponse.model_validate(row)


@router.get("/{name}", response_model=DatabaseResponse)
async def get_database(
    name: str,
    service: DatabaseServiceDep,
    namespace: str = Query(..., min_length=1),
) -> DatabaseResponse:
    row = await service.get(namespace=namespace, name=name)
    return DatabaseResponse.model_validate(row)


@router.get("/{name}/history", response_model=list[DatabaseResponse])
async def get_database_history(
    name: str,
    service: DatabaseServiceDep,
    namespace: str = Query(..., min_length=1),
) -> list[DatabaseResponse]:
    rows = await service.history(namespace=namespace, name=name)
    return [DatabaseResponse.model_validate(row) for row in rows]
