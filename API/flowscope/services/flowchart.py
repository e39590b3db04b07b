"""
Flowchart synthesis.

Three kinds of views are built from a listing of ContainerRecords:

- the system view: one group node per populated category, linked by a fixed
  table of category relationships;
- a category view: one service node per member, linked as a ring;
- a detail view: one container plus every container sharing a non-default
  network with it.

Every id is derived from record ids and category tags, so the same listing
always produces the same ids.
"""
import dataclasses
from typing import Awaitable, Callable, Sequence

from flowscope.domain.container import (
    ContainerRecord,
    ContainerStatus,
    ResourceSample,
    ServiceCategory,
)
from flowscope.domain.flowchart import (
    SYSTEM_OVERVIEW_ID,
    ConnectionType,
    Flowchart,
    FlowchartEdge,
    FlowchartNode,
    NodeType,
)
from flowscope.services.topology import SYSTEM_OVERVIEW_NAME

OVERVIEW_SUFFIX = "-overview"
DEFAULT_NETWORK = "bridge"

# (category, group title, description), in system view order.
SYSTEM_GROUPS: tuple[tuple[ServiceCategory, str, str], ...] = (
    (ServiceCategory.AIML, "AI/ML Services", "Consciousness, Learning, Memory systems"),
    (ServiceCategory.APPLICATION, "Application Services", "Backend APIs, Automation, Gateway"),
    (ServiceCategory.INFRASTRUCTURE, "Infrastructure", "Databases, Cache, Message Queue"),
    (ServiceCategory.FRONTEND, "Frontend", "Web dashboards and UIs"),
    (ServiceCategory.MONITORING, "Monitoring", "Prometheus, Grafana, Logging"),
    (ServiceCategory.VAL, "Val Autonomy", "Goal Manager, Code Editor, Git Service"),
    (ServiceCategory.BLOCKCHAIN, "Blockchain", "Validators, Chain, Faucet"),
    (ServiceCategory.GAME, "Game Services", "RPG Engine, Game Backend"),
)

# (source, target, label); an edge is drawn only when both groups exist.
CATEGORY_RELATIONS: tuple[tuple[ServiceCategory, ServiceCategory, str], ...] = (
    (ServiceCategory.FRONTEND, ServiceCategory.APPLICATION, "API calls"),
    (ServiceCategory.APPLICATION, ServiceCategory.INFRASTRUCTURE, "Data"),
    (ServiceCategory.APPLICATION, ServiceCategory.AIML, "AI requests"),
    (ServiceCategory.AIML, ServiceCategory.INFRASTRUCTURE, "Data"),
    (ServiceCategory.VAL, ServiceCategory.AIML, "Intelligence"),
    (ServiceCategory.VAL, ServiceCategory.APPLICATION, "Automation"),
    (ServiceCategory.MONITORING, ServiceCategory.APPLICATION, "Metrics"),
    (ServiceCategory.MONITORING, ServiceCategory.AIML, "Metrics"),
    (ServiceCategory.GAME, ServiceCategory.APPLICATION, "Backend"),
    (ServiceCategory.BLOCKCHAIN, ServiceCategory.INFRASTRUCTURE, "State"),
)

OVERVIEW_CATEGORIES = {group[0].value: group[0] for group in SYSTEM_GROUPS}


def edge_id(source: str, target: str) -> str:
    return f"{source}-to-{target}"


def rollup_status(members: Sequence[ContainerRecord]) -> ContainerStatus:
    up = sum(1 for m in members if m.status.is_up)
    if up == len(members):
        return ContainerStatus.HEALTHY
    if up > 0:
        return ContainerStatus.RUNNING
    return ContainerStatus.UNHEALTHY


def numeric_suffix(name: str) -> int:
    """Number after the last '-', 0 when there is none."""
    tail = name.rsplit("-", 1)[-1]
    return int(tail) if tail.isascii() and tail.isdigit() else 0


def service_node(record: ContainerRecord, child: str | None) -> FlowchartNode:
    return FlowchartNode(
        id=record.id,
        name=record.name,
        description=f"Image: {record.image}",
        status=record.status,
        node_type=NodeType.SERVICE,
        category=record.category,
        port=record.host_port,
        child_flowchart_id=child,
    )


# -------------------------------
# System view
# -------------------------------
def build_system_view(records: Sequence[ContainerRecord]) -> Flowchart:
    nodes: list[FlowchartNode] = []
    for category, title, description in SYSTEM_GROUPS:
        members = [r for r in records if r.category is category]
        if not members:
            continue
        nodes.append(
            FlowchartNode(
                id=category.value,
                name=f"{title} ({len(members)})",
                description=description,
                status=rollup_status(members),
                node_type=NodeType.GROUP,
                category=category,
                child_flowchart_id=category.overview_id,
            )
        )

    present = {node.id for node in nodes}
    edges = [
        FlowchartEdge(
            id=edge_id(source.value, target.value),
            source=source.value,
            target=target.value,
            label=label,
            connection_type=ConnectionType.PRIMARY,
        )
        for source, target, label in CATEGORY_RELATIONS
        if source.value in present and target.value in present
    ]

    return Flowchart(
        id=SYSTEM_OVERVIEW_ID,
        name=SYSTEM_OVERVIEW_NAME,
        description=(
            f"Complete system topology: {len(records)} containers "
            f"across {len(nodes)} categories"
        ),
        nodes=tuple(nodes),
        edges=tuple(edges),
    )


# -------------------------------
# Category view
# -------------------------------
def build_category_view(
    category: ServiceCategory, records: Sequence[ContainerRecord]
) -> Flowchart:
    """
    Members ordered by their numeric name suffix (validator-2 before
    validator-10), ties kept in name order. With more than one member the
    nodes form a ring of exactly len(members) edges.
    """
    members = sorted(
        (r for r in records if r.category is category),
        key=lambda r: numeric_suffix(r.name),
    )
    nodes = [service_node(m, child=m.name) for m in members]

    edges: list[FlowchartEdge] = []
    if len(members) > 1:
        for i, source in enumerate(members):
            target = members[(i + 1) % len(members)]
            edges.append(
                FlowchartEdge(
                    id=edge_id(source.id, target.id),
                    source=source.id,
                    target=target.id,
                    connection_type=ConnectionType.NETWORK,
                )
            )

    display = category.display_name
    return Flowchart(
        id=category.overview_id,
        name=f"{display} Services",
        description=f"{len(members)} services in the {display} category",
        nodes=tuple(nodes),
        edges=tuple(edges),
        parent_id=SYSTEM_OVERVIEW_ID,
    )


# -------------------------------
# Detail view
# -------------------------------
def shares_network(target: ContainerRecord, other: ContainerRecord) -> bool:
    return any(
        net != DEFAULT_NETWORK and net in other.networks for net in target.networks
    )


def build_detail_view(
    target: ContainerRecord, records: Sequence[ContainerRecord]
) -> Flowchart:
    nodes = [service_node(target, child=None)]
    edges: list[FlowchartEdge] = []
    for other in records:
        if other.id == target.id or not shares_network(target, other):
            continue
        nodes.append(service_node(other, child=other.name))
        edges.append(
            FlowchartEdge(
                id=edge_id(target.id, other.id),
                source=target.id,
                target=other.id,
                connection_type=ConnectionType.NETWORK,
            )
        )

    return Flowchart(
        id=target.name,
        name=f"{target.name} Detail",
        description=(
            f"Container {target.name} and its {len(nodes) - 1} connected services"
        ),
        nodes=tuple(nodes),
        edges=tuple(edges),
        parent_id=target.category.overview_id,
    )


# -------------------------------
# Dispatch
# -------------------------------
def category_for_view(view_id: str) -> ServiceCategory | None:
    if not view_id.endswith(OVERVIEW_SUFFIX):
        return None
    return OVERVIEW_CATEGORIES.get(view_id[: -len(OVERVIEW_SUFFIX)])


def resolve_view(view_id: str, records: Sequence[ContainerRecord]) -> Flowchart | None:
    """
    Resolve a view id to a flowchart, or None when nothing matches.

    Order: "system-overview", then "<category>-overview" for the eight known
    tags, then a container id or name.
    """
    if view_id == SYSTEM_OVERVIEW_ID:
        return build_system_view(records)

    category = category_for_view(view_id)
    if category is not None:
        return build_category_view(category, records)

    target = next((r for r in records if r.matches(view_id)), None)
    if target is not None:
        return build_detail_view(target, records)

    return None


SampleFetcher = Callable[[str], Awaitable[ResourceSample | None]]


async def attach_stats(
    flowchart: Flowchart,
    records: Sequence[ContainerRecord],
    fetch_sample: SampleFetcher,
) -> Flowchart:
    """
    Return a copy of `flowchart` whose running service nodes carry a sample.

    Samples are fetched one node after the other; a node without a sample
    keeps stats=None.
    """
    by_id = {r.id: r for r in records}
    nodes = []
    for node in flowchart.nodes:
        record = by_id.get(node.id)
        if node.node_type is NodeType.SERVICE and record is not None and record.status.is_up:
            sample = await fetch_sample(record.id)
            if sample is not None:
                node = dataclasses.replace(node, stats=sample)
        nodes.append(node)
    return dataclasses.replace(flowchart, nodes=tuple(nodes))
