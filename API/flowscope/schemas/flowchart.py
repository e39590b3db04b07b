# flowscope/schemas/flowchart.py
from datetime import datetime
from typing import Optional

from pydantic import ConfigDict

from flowscope.domain.container import ContainerStatus, ServiceCategory
from flowscope.domain.flowchart import ConnectionType, NodeType
from flowscope.schemas.container import CamelModel, ResourceSampleResponse


# ---------------------------
# Flowchart views
# ---------------------------
class FlowchartNodeResponse(CamelModel):
    id: str
    name: str
    description: str
    status: ContainerStatus
    node_type: NodeType
    category: ServiceCategory
    port: Optional[int] = None
    child_flowchart_id: Optional[str] = None
    stats: Optional[ResourceSampleResponse] = None


class FlowchartEdgeResponse(CamelModel):
    id: str
    source: str
    target: str
    label: Optional[str] = None
    connection_type: ConnectionType


class FlowchartResponse(CamelModel):
    id: str
    name: str
    description: str
    nodes: list[FlowchartNodeResponse]
    edges: list[FlowchartEdgeResponse]
    parent_id: Optional[str] = None


# ---------------------------
# Topology overview
# ---------------------------
class FlowchartSummaryResponse(CamelModel):
    id: str
    name: str
    node_count: int
    category: ServiceCategory


class TopologyResponse(CamelModel):
    total_containers: int
    running_containers: int
    healthy_containers: int
    unhealthy_containers: int
    categories: dict[str, int]
    flowcharts: list[FlowchartSummaryResponse]
    generated_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "totalContainers": 3,
                "runningContainers": 3,
                "healthyContainers": 1,
                "unhealthyContainers": 0,
                "categories": {"frontend": 1, "application": 1, "infrastructure": 1},
                "flowcharts": [
                    {"id": "system-overview", "name": "System Overview", "nodeCount": 3, "category": "other"},
                    {"id": "frontend-overview", "name": "Frontend Services", "nodeCount": 1, "category": "frontend"},
                ],
                "generatedAt": "2025-12-01T12:00:00Z",
            }
        }
    )
