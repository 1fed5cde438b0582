"""App provisioning routes."""

from fastapi import APIRouter, Query

from minicloud.dependencies import AppServiceDep
from minicloud.models.app import AppCreate, AppResponse

router = APIRouter(prefix="/apps", tags=["Apps"])


@router.post("", status_code=201, response_model=AppResponse)
async def create_app(body: AppCreate, service: AppServiceDep) -> AppResponse:
    row = await service.create(body)
    return AppResponse.model_validate(row)


@router.get("/{name}", response_model=AppResponse)
async def get_app(
    name: str,
    service: AppServiceDep,
    namespace: str = Query(..., min_length=1),
) -> AppResponse:
    row = await service.get(namespace=namespace, name=name)
    return AppResponse.model_validate(row)


@router.delete("/{name}", response_model=AppResponse)
async def delete_app(
    name: str,
    service: AppServiceDep,
    namespace: str = Query(..., min_length=1),
) -> AppResponse:
    row = await service.delete(namespace=namespace, name=name)
    return AppResponse.model_validate(row)


@router.get("/{name}/history", response_model=list[AppResponse])
async def get_app_history(
    name: str,
    service: AppServiceDep,
    namespace: str = Query(..., min_length=1),
) -> list[AppResponse]:
    rows = await service.history(namespace=namespace, name=name)
    return [AppResponse.model_validate(row) for row in rows]
