from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass, field

from flowscope.domain.container import ContainerStatus, ResourceSample, ServiceCategory

SYSTEM_OVERVIEW_ID = "system-overview"


class NodeType(str, Enum):
    SERVICE = "service"
    GROUP = "group"


class ConnectionType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DATA = "data"
    CONTROL = "control"
    NETWORK = "network"
    VOLUME = "volume"
    DEPENDS = "depends"


@dataclass(frozen=True)
class FlowchartNode:
    id: str
    name: str
    description: str
    status: ContainerStatus
    node_type: NodeType
    category: ServiceCategory
    port: int | None = None
    child_flowchart_id: str | None = None
    stats: ResourceSample | None = None


@dataclass(frozen=True)
class FlowchartEdge:
    id: str
    source: str
    target: str
    connection_type: ConnectionType
    label: str | None = None


@dataclass(frozen=True)
class Flowchart:
    id: str
    name: str
    description: str
    nodes: tuple[FlowchartNode, ...] = ()
    edges: tuple[FlowchartEdge, ...] = ()
    parent_id: str | None = None


@dataclass(frozen=True)
class FlowchartSummary:
    id: str
    name: str
    node_count: int
    category: ServiceCategory


@dataclass(frozen=True)
class TopologySnapshot:
    total_containers: int
    running_containers: int
    healthy_containers: int
    unhealthy_containers: int
    categories: dict[str, int] = field(default_factory=dict)
    flowcharts: tuple[FlowchartSummary, ...] = ()
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
