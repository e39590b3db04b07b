from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass, field


class ContainerStatus(str, Enum):
    RUNNING = "running"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    EXITED = "exited"
    CREATED = "created"
    PAUSED = "paused"
    RESTARTING = "restarting"
    DEAD = "dead"

    @classmethod
    def from_state(cls, state: str | None) -> "ContainerStatus":
        """Map a raw runtime state string; anything unknown counts as exited."""
        try:
            return cls((state or "").lower())
        except ValueError:
            return cls.EXITED

    @property
    def is_up(self) -> bool:
        return self in (ContainerStatus.RUNNING, ContainerStatus.HEALTHY)


class ServiceCategory(str, Enum):
    AIML = "aiml"
    APPLICATION = "application"
    INFRASTRUCTURE = "infrastructure"
    FRONTEND = "frontend"
    MONITORING = "monitoring"
    GAME = "game"
    VAL = "val"
    BLOCKCHAIN = "blockchain"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def overview_id(self) -> str:
        return f"{self.value}-overview"


_DISPLAY_NAMES = {
    ServiceCategory.AIML: "AI/ML",
    ServiceCategory.APPLICATION: "Application",
    ServiceCategory.INFRASTRUCTURE: "Infrastructure",
    ServiceCategory.FRONTEND: "Frontend",
    ServiceCategory.MONITORING: "Monitoring",
    ServiceCategory.GAME: "Game",
    ServiceCategory.VAL: "Val Autonomy",
    ServiceCategory.BLOCKCHAIN: "Blockchain",
    ServiceCategory.OTHER: "Other",
}


@dataclass(frozen=True)
class ResourceSample:
    cpu_percent: float = 0.0
    memory_usage_mb: float = 0.0
    memory_limit_mb: float = 0.0
    memory_percent: float = 0.0
    network_rx_mb: float = 0.0
    network_tx_mb: float = 0.0
    block_read_mb: float = 0.0
    block_write_mb: float = 0.0
    pid_count: int = 0


@dataclass(frozen=True)
class PortMapping:
    container_port: int
    host_port: int | None = None
    protocol: str = "tcp"


@dataclass(frozen=True)
class ContainerRecord:
    id: str
    name: str
    image: str
    status: ContainerStatus
    category: ServiceCategory
    health: str | None = None
    ports: tuple[PortMapping, ...] = ()
    networks: tuple[str, ...] = ()
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    labels: dict[str, str] = field(default_factory=dict)
    paired_variant_hint: str | None = None
    stats: ResourceSample | None = None
    image_size_mb: float | None = None

    @property
    def host_port(self) -> int | None:
        """Host port of the first published port, if any."""
        return self.ports[0].host_port if self.ports else None

    def matches(self, key: str) -> bool:
        return self.id == key or self.name == key


@dataclass(frozen=True)
class VolumeMount:
    source: str
    destination: str
    mode: str = "rw"


@dataclass(frozen=True)
class HealthCheckConfig:
    test: tuple[str, ...] = ()
    interval_seconds: int = 0
    timeout_seconds: int = 0
    retries: int = 0
    start_period_seconds: int = 0


@dataclass(frozen=True)
class ContainerDetail:
    info: ContainerRecord
    environment: tuple[str, ...] = ()
    command: str | None = None
    entrypoint: tuple[str, ...] | None = None
    working_dir: str | None = None
    volumes: tuple[VolumeMount, ...] = ()
    health_check: HealthCheckConfig | None = None


@dataclass(frozen=True)
class ContainerLogs:
    container_id: str
    container_name: str
    logs: tuple[str, ...]
    tail: int


@dataclass(frozen=True)
class ActionResult:
    success: bool
    container_id: str
    container_name: str
    action: str
    message: str


@dataclass(frozen=True)
class NetworkInfo:
    id: str
    name: str
    driver: str = "bridge"
    containers: tuple[str, ...] = ()
