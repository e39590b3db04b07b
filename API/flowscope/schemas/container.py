from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional

from flowscope.domain.container import (
    ContainerDetail,
    ContainerStatus,
    ServiceCategory,
)


class CamelModel(BaseModel):
    """Wire models: camelCase on the wire, built straight from domain dataclasses."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ResourceSampleResponse(CamelModel):
    cpu_percent: float
    memory_usage_mb: float
    memory_limit_mb: float
    memory_percent: float
    network_rx_mb: float
    network_tx_mb: float
    block_read_mb: float
    block_write_mb: float
    pid_count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "cpuPercent": 1.25,
                "memoryUsageMb": 123.46,
                "memoryLimitMb": 2048.0,
                "memoryPercent": 6.03,
                "networkRxMb": 0.52,
                "networkTxMb": 0.11,
                "blockReadMb": 12.0,
                "blockWriteMb": 0.0,
                "pidCount": 7,
            }
        }
    )


class PortMappingResponse(CamelModel):
    host_port: Optional[int] = None
    container_port: int
    protocol: str = "tcp"


class ContainerResponse(CamelModel):
    id: str
    name: str
    image: str
    status: ContainerStatus
    health: Optional[str] = None
    category: ServiceCategory
    ports: list[PortMappingResponse] = []
    networks: list[str] = []
    created_at: datetime
    labels: dict[str, str] = {}
    paired_variant_hint: Optional[str] = None
    stats: Optional[ResourceSampleResponse] = None
    image_size_mb: Optional[float] = None


class VolumeMountResponse(CamelModel):
    source: str
    destination: str
    mode: str


class HealthCheckResponse(CamelModel):
    test: list[str]
    interval_seconds: int
    timeout_seconds: int
    retries: int
    start_period_seconds: int


class ContainerDetailResponse(ContainerResponse):
    environment: list[str] = []
    command: Optional[str] = None
    entrypoint: Optional[list[str]] = None
    working_dir: Optional[str] = None
    volumes: list[VolumeMountResponse] = []
    health_check: Optional[HealthCheckResponse] = None

    @classmethod
    def from_detail(cls, detail: ContainerDetail) -> "ContainerDetailResponse":
        info = ContainerResponse.model_validate(detail.info)
        return cls(
            **dict(info),
            environment=list(detail.environment),
            command=detail.command,
            entrypoint=list(detail.entrypoint) if detail.entrypoint is not None else None,
            working_dir=detail.working_dir,
            volumes=[VolumeMountResponse.model_validate(v) for v in detail.volumes],
            health_check=(
                HealthCheckResponse.model_validate(detail.health_check)
                if detail.health_check
                else None
            ),
        )


class ContainerLogsResponse(CamelModel):
    container_id: str
    container_name: str
    logs: list[str]
    tail: int


class ActionResultResponse(CamelModel):
    success: bool
    container_id: str
    container_name: str
    action: str
    message: str


class NetworkResponse(CamelModel):
    id: str
    name: str
    driver: str
    containers: list[str] = []
