"""Raw values handed over by a container runtime client, before normalization."""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RawPort:
    private_port: int
    public_port: int | None = None
    type: str | None = None


@dataclass(frozen=True)
class RawContainer:
    id: str
    names: tuple[str, ...] = ()
    image: str = ""
    state: str | None = None
    status: str | None = None
    ports: tuple[RawPort, ...] = ()
    networks: tuple[str, ...] = ()
    labels: dict[str, str] = field(default_factory=dict)
    created: int | None = None  # unix seconds


@dataclass(frozen=True)
class RawNetwork:
    id: str
    name: str
    driver: str | None = None
    containers: tuple[str, ...] = ()


@dataclass(frozen=True)
class RawImage:
    repo_tags: tuple[str, ...] = ()
    size: int = 0  # bytes


@dataclass(frozen=True)
class RawMount:
    source: str = ""
    destination: str = ""
    mode: str = ""
    rw: bool = True


@dataclass(frozen=True)
class RawHealthcheck:
    test: tuple[str, ...] = ()
    interval: int = 0  # nanoseconds
    timeout: int = 0
    retries: int = 0
    start_period: int = 0


@dataclass(frozen=True)
class RawInspect:
    env: tuple[str, ...] = ()
    cmd: tuple[str, ...] | None = None
    entrypoint: tuple[str, ...] | None = None
    working_dir: str | None = None
    mounts: tuple[RawMount, ...] = ()
    healthcheck: RawHealthcheck | None = None


@dataclass(frozen=True)
class RawInterfaceCounters:
    rx_bytes: int = 0
    tx_bytes: int = 0


@dataclass(frozen=True)
class RawBlockIOEntry:
    op: str
    value: int = 0


@dataclass(frozen=True)
class RawCounters:
    cpu_total: int = 0
    system_usage: int = 0
    online_cpus: int = 0
    memory_usage: int = 0  # bytes
    memory_limit: int | None = None
    interfaces: tuple[RawInterfaceCounters, ...] = ()
    block_io: tuple[RawBlockIOEntry, ...] = ()
    pids: int = 0


@dataclass(frozen=True)
class RawStatsPair:
    """One one-shot read: the current counters and the ones just before."""
    current: RawCounters
    previous: RawCounters
