# flowscope/schemas/updates.py
from datetime import datetime, timezone
from typing import Literal, Union

from pydantic import Field

from flowscope.domain.flowchart import TopologySnapshot
from flowscope.schemas.container import CamelModel, ContainerResponse


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ContainerUpdate(CamelModel):
    type: Literal["containerUpdate"] = "containerUpdate"
    containers: list[ContainerResponse]
    timestamp: str = Field(default_factory=utc_timestamp)


class TopologyUpdate(CamelModel):
    type: Literal["topologyUpdate"] = "topologyUpdate"
    total_containers: int
    running_containers: int
    healthy_containers: int
    unhealthy_containers: int
    timestamp: str = Field(default_factory=utc_timestamp)

    @classmethod
    def from_snapshot(cls, snapshot: TopologySnapshot) -> "TopologyUpdate":
        return cls(
            total_containers=snapshot.total_containers,
            running_containers=snapshot.running_containers,
            healthy_containers=snapshot.healthy_containers,
            unhealthy_containers=snapshot.unhealthy_containers,
        )


class Heartbeat(CamelModel):
    type: Literal["heartbeat"] = "heartbeat"
    timestamp: str = Field(default_factory=utc_timestamp)


UpdateMessage = Union[ContainerUpdate, TopologyUpdate, Heartbeat]


def to_wire(message: UpdateMessage) -> dict:
    return message.model_dump(mode="json", by_alias=True, exclude_none=True)
