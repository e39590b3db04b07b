# tests/test_normalizer.py
from datetime import datetime, timezone

from flowscope.domain.container import ContainerStatus, ServiceCategory
from flowscope.domain.runtime import RawContainer, RawPort
from flowscope.services.normalizer import (
    normalize,
    normalize_one,
    paired_variant_hint,
    parse_status,
    port_mapping,
)


def test_normalize_healthy_frontend(make_raw):
    raw = make_raw(
        "frontend-dashboard",
        id="a1b2c3d4e5f6a7b8c9d0",
        status="Up 2 hours (healthy)",
        ports=(RawPort(private_port=80, public_port=3000, type="tcp"),),
    )

    record = normalize_one(raw)

    assert record.id == "a1b2c3d4e5f6"
    assert record.name == "frontend-dashboard"
    assert record.status is ContainerStatus.HEALTHY
    assert record.health == "healthy"
    assert record.category is ServiceCategory.FRONTEND
    assert record.host_port == 3000


def test_unhealthy_token_overrides_running_state():
    status, health = parse_status("running", "Up 3 minutes (unhealthy)")
    assert status is ContainerStatus.UNHEALTHY
    assert health == "unhealthy"


def test_status_from_state_without_health_token():
    assert parse_status("running", "Up 3 minutes") == (ContainerStatus.RUNNING, None)
    assert parse_status("exited", "Exited (0) 2 days ago") == (ContainerStatus.EXITED, None)
    assert parse_status("paused", None) == (ContainerStatus.PAUSED, None)


def test_unknown_state_counts_as_exited():
    assert parse_status("removing", "") == (ContainerStatus.EXITED, None)
    assert parse_status(None, None) == (ContainerStatus.EXITED, None)


def test_port_protocol_is_lowercased_and_defaults_to_tcp():
    assert port_mapping(RawPort(private_port=53, public_port=53, type="UDP")).protocol == "udp"
    assert port_mapping(RawPort(private_port=80, type=None)).protocol == "tcp"
    assert port_mapping(RawPort(private_port=80, type="quic")).protocol == "tcp"


def test_unpublished_port_has_no_host_port():
    mapping = port_mapping(RawPort(private_port=5432))
    assert mapping.container_port == 5432
    assert mapping.host_port is None


def test_paired_variant_hint():
    assert paired_variant_hint("application-gateway-prod") == "application-gateway-rust-prod"
    assert paired_variant_hint("application-gateway-rust-prod") is None
    assert paired_variant_hint("application-gateway") is None


def test_missing_name_falls_back_to_short_id():
    record = normalize_one(RawContainer(id="deadbeefcafe0123456789", state="running"))
    assert record.name == "deadbeefcafe"
    assert record.category is ServiceCategory.OTHER


def test_created_at_is_utc():
    record = normalize_one(RawContainer(id="abc", names=("/x",), created=0))
    assert record.created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_duplicate_network_names_are_collapsed():
    record = normalize_one(RawContainer(id="abc", names=("/x",), networks=("net", "net", "other")))
    assert record.networks == ("net", "other")


def test_normalize_sorts_by_name(make_raw):
    records = normalize([make_raw("zeta"), make_raw("alpha"), make_raw("monitoring-grafana")])
    assert [r.name for r in records] == ["alpha", "monitoring-grafana", "zeta"]


def test_normalize_empty_listing():
    assert normalize([]) == []
