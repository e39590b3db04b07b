from fastapi import APIRouter, Depends, Query

from flowscope.api.dependencies import get_container_service
from flowscope.api.errors import api_errors
from flowscope.services.container_service import ContainerService
from flowscope.schemas.container import (
    ActionResultResponse,
    ContainerDetailResponse,
    ContainerLogsResponse,
    ContainerResponse,
    ResourceSampleResponse,
)

router = APIRouter(prefix="/api", tags=["containers"])


@router.get("/containers", response_model=list[ContainerResponse], response_model_exclude_none=True)
@api_errors("list containers")
async def list_containers(
    stats: bool = Query(False, description="Attach live resource stats and image sizes"),
    service: ContainerService = Depends(get_container_service),
):
    records = await service.list_containers(with_stats=stats)
    return [ContainerResponse.model_validate(r) for r in records]


@router.get("/container/{container_id}", response_model=ContainerResponse, response_model_exclude_none=True)
@api_errors("get container")
async def get_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    return ContainerResponse.model_validate(await service.get_container(container_id))


@router.get(
    "/container/{container_id}/detail",
    response_model=ContainerDetailResponse,
    response_model_exclude_none=True,
    summary="Container configuration: environment, command, volumes, health check",
)
@api_errors("get container detail")
async def get_container_detail(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    detail = await service.get_container_detail(container_id)
    return ContainerDetailResponse.from_detail(detail)


@router.get("/container/{container_id}/logs", response_model=ContainerLogsResponse)
@api_errors("get container logs")
async def get_container_logs(
    container_id: str,
    tail: int | None = Query(None, ge=1, description="Number of trailing log lines"),
    service: ContainerService = Depends(get_container_service),
):
    logs = await service.get_container_logs(container_id, tail)
    return ContainerLogsResponse.model_validate(logs)


@router.get("/container/{container_id}/stats", response_model=ResourceSampleResponse)
@api_errors("get container stats")
async def get_container_stats(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    return ResourceSampleResponse.model_validate(await service.get_container_stats(container_id))


# ---------------------------
# Lifecycle actions
# ---------------------------
# A daemon refusal is a 200 with success=false; only unknown ids and an
# unreachable daemon are HTTP errors.
@router.post("/container/{container_id}/restart", response_model=ActionResultResponse)
@api_errors("restart container")
async def restart_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    return ActionResultResponse.model_validate(await service.restart_container(container_id))


@router.post("/container/{container_id}/stop", response_model=ActionResultResponse)
@api_errors("stop container")
async def stop_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    return ActionResultResponse.model_validate(await service.stop_container(container_id))


@router.post("/container/{container_id}/start", response_model=ActionResultResponse)
@api_errors("start container")
async def start_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
):
    return ActionResultResponse.model_validate(await service.start_container(container_id))
