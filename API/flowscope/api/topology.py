# flowscope/api/topology.py
from fastapi import APIRouter, Depends, Query

from flowscope.api.dependencies import get_container_service
from flowscope.api.errors import api_errors
from flowscope.services.container_service import ContainerService
from flowscope.schemas.container import NetworkResponse
from flowscope.schemas.flowchart import FlowchartResponse, TopologyResponse

router = APIRouter(prefix="/api", tags=["topology"])


# ---------------------------
# System topology overview
# ---------------------------
@router.get("/topology", response_model=TopologyResponse)
@api_errors("get system topology")
async def get_topology(service: ContainerService = Depends(get_container_service)):
    return TopologyResponse.model_validate(await service.topology())


# ---------------------------
# Flowchart views
# ---------------------------
@router.get(
    "/flowchart/{flowchart_id}",
    response_model=FlowchartResponse,
    response_model_exclude_none=True,
    summary="Get a flowchart view",
    description=(
        "`system-overview`, `<category>-overview` or a container id/name. "
        "With `stats=true`, running service nodes carry a resource sample."
    ),
)
@api_errors("generate flowchart")
async def get_flowchart(
    flowchart_id: str,
    stats: bool = Query(False, description="Attach live resource stats to service nodes"),
    service: ContainerService = Depends(get_container_service),
):
    chart = await service.flowchart(flowchart_id, with_stats=stats)
    return FlowchartResponse.model_validate(chart)


# ---------------------------
# Networks and images
# ---------------------------
@router.get("/networks", response_model=list[NetworkResponse])
@api_errors("list networks")
async def list_networks(service: ContainerService = Depends(get_container_service)):
    return [NetworkResponse.model_validate(n) for n in await service.list_networks()]


@router.get("/images/sizes", response_model=dict[str, float])
@api_errors("list image sizes")
async def list_image_sizes(service: ContainerService = Depends(get_container_service)):
    return await service.list_image_sizes()
