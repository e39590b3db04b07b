from collections import Counter
from typing import Sequence

from flowscope.domain.container import ContainerRecord, ContainerStatus, ServiceCategory
from flowscope.domain.flowchart import (
    SYSTEM_OVERVIEW_ID,
    FlowchartSummary,
    TopologySnapshot,
)

SYSTEM_OVERVIEW_NAME = "System Overview"


def group_by_category(records: Sequence[ContainerRecord]) -> dict[ServiceCategory, list[ContainerRecord]]:
    """Group records per category, categories in declaration order, members in input order."""
    groups: dict[ServiceCategory, list[ContainerRecord]] = {}
    for category in ServiceCategory:
        members = [r for r in records if r.category is category]
        if members:
            groups[category] = members
    return groups


def flowchart_summaries(records: Sequence[ContainerRecord]) -> list[FlowchartSummary]:
    summaries = [
        FlowchartSummary(
            id=SYSTEM_OVERVIEW_ID,
            name=SYSTEM_OVERVIEW_NAME,
            node_count=len(records),
            category=ServiceCategory.OTHER,
        )
    ]
    for category, members in group_by_category(records).items():
        summaries.append(
            FlowchartSummary(
                id=category.overview_id,
                name=f"{category.display_name} Services",
                node_count=len(members),
                category=category,
            )
        )
    return summaries


def aggregate(records: Sequence[ContainerRecord]) -> TopologySnapshot:
    per_category = Counter(r.category.value for r in records)
    return TopologySnapshot(
        total_containers=len(records),
        running_containers=sum(1 for r in records if r.status.is_up),
        healthy_containers=sum(1 for r in records if r.status is ContainerStatus.HEALTHY),
        unhealthy_containers=sum(1 for r in records if r.status is ContainerStatus.UNHEALTHY),
        categories=dict(per_category),
        flowcharts=tuple(flowchart_summaries(records)),
    )
