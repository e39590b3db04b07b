from datetime import datetime, timezone
from typing import Iterable, List

from flowscope.domain.container import (
    ContainerRecord,
    ContainerStatus,
    PortMapping,
)
from flowscope.domain.runtime import RawContainer, RawPort
from flowscope.services.classifier import classify

SHORT_ID_LENGTH = 12
KNOWN_PROTOCOLS = {"tcp", "udp", "sctp"}

HEALTHY_TOKEN = "(healthy)"
UNHEALTHY_TOKEN = "(unhealthy)"


def short_id(runtime_id: str) -> str:
    return runtime_id[:SHORT_ID_LENGTH]


def container_name(raw: RawContainer) -> str:
    if raw.names:
        return raw.names[0].lstrip("/")
    return short_id(raw.id)


def parse_status(state: str | None, status_text: str | None) -> tuple[ContainerStatus, str | None]:
    """
    Return (status, health).

    The health token in the status text wins over the raw state, so a
    "running" container reported as "Up 2 hours (healthy)" is Healthy.
    """
    text = status_text or ""
    if HEALTHY_TOKEN in text:
        return ContainerStatus.HEALTHY, "healthy"
    if UNHEALTHY_TOKEN in text:
        return ContainerStatus.UNHEALTHY, "unhealthy"
    return ContainerStatus.from_state(state), None


def port_mapping(raw: RawPort) -> PortMapping:
    protocol = (raw.type or "").lower()
    if protocol not in KNOWN_PROTOCOLS:
        protocol = "tcp"
    return PortMapping(
        container_port=raw.private_port,
        host_port=raw.public_port,
        protocol=protocol,
    )


def paired_variant_hint(name: str) -> str | None:
    """Guess the name of the "-rust-prod" twin of a "-prod" service."""
    if "rust" in name or not name.endswith("-prod"):
        return None
    return name[: -len("-prod")] + "-rust-prod"


def created_at(raw: RawContainer) -> datetime:
    if raw.created is None:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(raw.created, tz=timezone.utc)


def normalize_one(raw: RawContainer) -> ContainerRecord:
    name = container_name(raw)
    status, health = parse_status(raw.state, raw.status)
    return ContainerRecord(
        id=short_id(raw.id),
        name=name,
        image=raw.image,
        status=status,
        health=health,
        category=classify(name),
        ports=tuple(port_mapping(p) for p in raw.ports),
        networks=tuple(dict.fromkeys(raw.networks)),
        created_at=created_at(raw),
        labels=dict(raw.labels),
        paired_variant_hint=paired_variant_hint(name),
    )


def normalize(raw_containers: Iterable[RawContainer]) -> List[ContainerRecord]:
    """Build ContainerRecords sorted by name; this is the canonical order."""
    records = [normalize_one(raw) for raw in raw_containers]
    records.sort(key=lambda r: r.name)
    return records
