# tests/test_topology.py
from flowscope.domain.container import ContainerStatus, ServiceCategory
from flowscope.services.topology import aggregate, group_by_category


def test_aggregate_counts(make_record):
    records = [
        make_record("frontend-dashboard", ContainerStatus.HEALTHY),
        make_record("application-gateway", ContainerStatus.RUNNING),
        make_record("infrastructure-postgres", ContainerStatus.UNHEALTHY),
        make_record("infrastructure-redis", ContainerStatus.EXITED),
    ]

    snapshot = aggregate(records)

    assert snapshot.total_containers == 4
    assert snapshot.running_containers == 2
    assert snapshot.healthy_containers == 1
    assert snapshot.unhealthy_containers == 1
    assert snapshot.categories == {"frontend": 1, "application": 1, "infrastructure": 2}


def test_category_counts_sum_to_total(make_record):
    names = ["aiml-a", "aiml-b", "val-x", "postgres", "my-chain", "game-1"]
    snapshot = aggregate([make_record(n) for n in names])

    assert sum(snapshot.categories.values()) == snapshot.total_containers
    assert snapshot.categories["other"] == 1


def test_summaries_start_with_system_overview(make_record):
    records = [make_record("frontend-dashboard"), make_record("aiml-memory"), make_record("aiml-learning")]

    summaries = aggregate(records).flowcharts

    assert summaries[0].id == "system-overview"
    assert summaries[0].name == "System Overview"
    assert summaries[0].node_count == 3
    assert [(s.id, s.name, s.node_count) for s in summaries[1:]] == [
        ("aiml-overview", "AI/ML Services", 2),
        ("frontend-overview", "Frontend Services", 1),
    ]


def test_empty_listing():
    snapshot = aggregate([])

    assert snapshot.total_containers == 0
    assert snapshot.categories == {}
    assert [s.id for s in snapshot.flowcharts] == ["system-overview"]
    assert snapshot.generated_at.tzinfo is not None


def test_group_by_category_skips_empty_groups(make_record):
    groups = group_by_category([make_record("val-goal-manager"), make_record("postgres")])
    assert list(groups) == [ServiceCategory.VAL, ServiceCategory.OTHER]
