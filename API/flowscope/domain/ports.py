from typing import Protocol, List

from flowscope.domain.runtime import (
    RawContainer,
    RawImage,
    RawInspect,
    RawNetwork,
    RawStatsPair,
)


class ContainerRuntime(Protocol):
    """
    Read-only handle on the container daemon, shared by every request.

    Read methods raise UpstreamUnavailable when the daemon cannot answer.
    Lifecycle methods raise ActionRejected when the daemon refuses the command.
    """

    # -------------------------------
    # Listing
    # -------------------------------
    async def list_containers(self, include_stopped: bool = True) -> List[RawContainer]:
        """List containers, stopped ones included unless told otherwise."""
        ...

    async def list_networks(self) -> List[RawNetwork]:
        ...

    async def list_images(self) -> List[RawImage]:
        ...

    # -------------------------------
    # Single container
    # -------------------------------
    async def inspect_container(self, container_id: str) -> RawInspect | None:
        """Return the container configuration, or None if it vanished."""
        ...

    async def get_stats_once(self, container_id: str) -> RawStatsPair | None:
        """One-shot counter read. None when the container is not running."""
        ...

    async def get_logs(self, container_id: str, tail: int = 100) -> List[str]:
        ...

    # -------------------------------
    # Lifecycle
    # -------------------------------
    async def restart(self, container_id: str, grace_period: int) -> None:
        ...

    async def stop(self, container_id: str, grace_period: int) -> None:
        ...

    async def start(self, container_id: str) -> None:
        ...
