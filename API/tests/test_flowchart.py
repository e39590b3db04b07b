# tests/test_flowchart.py
import pytest
from unittest.mock import AsyncMock

from flowscope.domain.container import (
    ContainerStatus,
    PortMapping,
    ResourceSample,
    ServiceCategory,
)
from flowscope.domain.flowchart import ConnectionType, NodeType
from flowscope.services.flowchart import (
    attach_stats,
    build_category_view,
    build_detail_view,
    build_system_view,
    numeric_suffix,
    resolve_view,
    rollup_status,
)


def edges_reference_nodes(chart):
    ids = {n.id for n in chart.nodes}
    return all(e.source in ids and e.target in ids for e in chart.edges)


# -------------------------------
# System view
# -------------------------------
def test_system_view_only_links_present_categories(make_record):
    records = [
        make_record("frontend-dashboard"),
        make_record("application-gateway"),
        make_record("infrastructure-postgres"),
    ]

    chart = build_system_view(records)

    assert chart.id == "system-overview"
    assert chart.parent_id is None
    assert len(chart.nodes) == 3
    assert all(n.node_type is NodeType.GROUP for n in chart.nodes)
    edge_ids = {e.id for e in chart.edges}
    assert "frontend-to-application" in edge_ids
    assert "application-to-infrastructure" in edge_ids
    assert "aiml-to-infrastructure" not in edge_ids
    assert all(e.connection_type is ConnectionType.PRIMARY for e in chart.edges)
    assert edges_reference_nodes(chart)


def test_system_view_drops_relation_with_missing_endpoint(make_record):
    records = [make_record("frontend-dashboard"), make_record("monitoring-grafana")]

    chart = build_system_view(records)

    assert {n.id for n in chart.nodes} == {"frontend", "monitoring"}
    assert "frontend-to-application" not in {e.id for e in chart.edges}
    assert chart.edges == ()


def test_system_view_group_nodes(make_record):
    records = [
        make_record("aiml-memory"),
        make_record("aiml-learning", ContainerStatus.EXITED),
        make_record("val-goal-manager"),
    ]

    chart = build_system_view(records)
    aiml, val = chart.nodes

    assert aiml.id == "aiml"
    assert aiml.name == "AI/ML Services (2)"
    assert aiml.status is ContainerStatus.RUNNING
    assert aiml.child_flowchart_id == "aiml-overview"
    assert val.name == "Val Autonomy (1)"
    assert val.status is ContainerStatus.HEALTHY
    assert [(e.id, e.label) for e in chart.edges] == [("val-to-aiml", "Intelligence")]
    assert chart.description == "Complete system topology: 3 containers across 2 categories"


def test_system_view_leaves_out_uncategorized(make_record):
    chart = build_system_view([make_record("postgres")])
    assert chart.nodes == ()
    assert chart.edges == ()


def test_rollup_status(make_record):
    up = make_record("a")
    down = make_record("b", ContainerStatus.EXITED)

    assert rollup_status([up, up]) is ContainerStatus.HEALTHY
    assert rollup_status([up, down]) is ContainerStatus.RUNNING
    assert rollup_status([down]) is ContainerStatus.UNHEALTHY


# -------------------------------
# Category view
# -------------------------------
def test_category_view_numeric_order_and_ring(make_record):
    records = [
        make_record("val-validator-1"),
        make_record("val-validator-10"),
        make_record("val-validator-2"),
    ]

    chart = build_category_view(ServiceCategory.VAL, records)

    assert [n.name for n in chart.nodes] == ["val-validator-1", "val-validator-2", "val-validator-10"]
    by_name = {r.name: r.id for r in records}
    assert [(e.source, e.target) for e in chart.edges] == [
        (by_name["val-validator-1"], by_name["val-validator-2"]),
        (by_name["val-validator-2"], by_name["val-validator-10"]),
        (by_name["val-validator-10"], by_name["val-validator-1"]),
    ]
    assert all(e.connection_type is ConnectionType.NETWORK for e in chart.edges)
    assert chart.parent_id == "system-overview"


@pytest.mark.parametrize("count, expected_edges", [(0, 0), (1, 0), (2, 2), (5, 5)])
def test_category_view_ring_size(make_record, count, expected_edges):
    records = [make_record(f"game-node-{i}") for i in range(count)]

    chart = build_category_view(ServiceCategory.GAME, records)

    assert len(chart.nodes) == count
    assert len(chart.edges) == expected_edges
    assert edges_reference_nodes(chart)


def test_category_view_service_nodes(make_record):
    record = make_record(
        "frontend-dashboard",
        image="dash:1.2",
        ports=(PortMapping(container_port=80, host_port=3000),),
    )

    (node,) = build_category_view(ServiceCategory.FRONTEND, [record]).nodes

    assert node.node_type is NodeType.SERVICE
    assert node.description == "Image: dash:1.2"
    assert node.port == 3000
    assert node.child_flowchart_id == "frontend-dashboard"


def test_unsuffixed_names_sort_first_in_name_order(make_record):
    records = [make_record("aiml-b"), make_record("aiml-a-3"), make_record("aiml-c")]
    chart = build_category_view(ServiceCategory.AIML, records)
    assert [n.name for n in chart.nodes] == ["aiml-b", "aiml-c", "aiml-a-3"]


def test_numeric_suffix():
    assert numeric_suffix("val-validator-10") == 10
    assert numeric_suffix("frontend") == 0
    assert numeric_suffix("frontend-x") == 0


def test_numeric_suffix_ignores_non_ascii_digits():
    assert numeric_suffix("game-²") == 0
    assert numeric_suffix("game-١٢") == 0


# -------------------------------
# Detail view
# -------------------------------
def test_detail_view_links_containers_sharing_a_network(make_record):
    target = make_record("application-gateway", networks=("bridge", "backend"))
    peer = make_record("infrastructure-postgres", networks=("backend",))
    bridge_only = make_record("monitoring-grafana", networks=("bridge",))

    chart = build_detail_view(target, [bridge_only, peer, target])

    assert chart.id == "application-gateway"
    assert chart.name == "application-gateway Detail"
    assert chart.parent_id == "application-overview"
    assert [n.id for n in chart.nodes] == [target.id, peer.id]
    assert chart.nodes[0].child_flowchart_id is None
    assert chart.nodes[1].child_flowchart_id == "infrastructure-postgres"
    assert [e.id for e in chart.edges] == [f"{target.id}-to-{peer.id}"]
    assert edges_reference_nodes(chart)


def test_detail_view_without_peers(make_record):
    target = make_record("postgres", networks=("bridge",))
    chart = build_detail_view(target, [target])
    assert len(chart.nodes) == 1
    assert chart.edges == ()
    assert chart.parent_id == "other-overview"


# -------------------------------
# Dispatch
# -------------------------------
def test_resolve_view_dispatch(make_record):
    gateway = make_record("application-gateway")
    records = [gateway]

    assert resolve_view("system-overview", records).id == "system-overview"
    assert resolve_view("application-overview", records).id == "application-overview"
    assert resolve_view(gateway.id, records).id == "application-gateway"
    assert resolve_view("application-gateway", records).id == "application-gateway"
    assert resolve_view("does-not-exist", records) is None
    assert resolve_view("other-overview", records) is None


def test_category_view_for_empty_category_is_empty(make_record):
    chart = resolve_view("blockchain-overview", [make_record("aiml-x")])
    assert chart.nodes == ()
    assert chart.edges == ()


def test_views_are_deterministic(make_record):
    records = [make_record(n) for n in ("aiml-a", "aiml-b-2", "application-api", "frontend-ui")]
    for view_id in ("system-overview", "aiml-overview", "application-api"):
        assert resolve_view(view_id, records) == resolve_view(view_id, records)


# -------------------------------
# Stats attachment
# -------------------------------
@pytest.mark.asyncio
async def test_attach_stats_only_running_service_nodes(make_record):
    running = make_record("game-a-1")
    stopped = make_record("game-b-2", ContainerStatus.EXITED)
    records = [running, stopped]
    sample = ResourceSample(cpu_percent=12.5, pid_count=3)
    fetch = AsyncMock(return_value=sample)

    chart = await attach_stats(build_category_view(ServiceCategory.GAME, records), records, fetch)

    fetch.assert_awaited_once_with(running.id)
    assert chart.nodes[0].stats == sample
    assert chart.nodes[1].stats is None


@pytest.mark.asyncio
async def test_attach_stats_keeps_node_when_no_sample(make_record):
    record = make_record("game-a")
    chart = build_category_view(ServiceCategory.GAME, [record])

    enriched = await attach_stats(chart, [record], AsyncMock(return_value=None))

    assert enriched == chart
