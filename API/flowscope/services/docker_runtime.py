import asyncio
import logging
import threading
from typing import Any, Callable, List, Optional, TypeVar

import docker
from docker.errors import APIError, DockerException, NotFound
from requests.exceptions import RequestException

from flowscope.core.config import Settings
from flowscope.domain.errors import ActionRejected, ContainerNotFound, UpstreamUnavailable
from flowscope.domain.ports import ContainerRuntime
from flowscope.domain.runtime import (
    RawBlockIOEntry,
    RawContainer,
    RawCounters,
    RawHealthcheck,
    RawImage,
    RawInspect,
    RawInterfaceCounters,
    RawMount,
    RawNetwork,
    RawPort,
    RawStatsPair,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -------------------------------
# Payload parsing
# -------------------------------
def parse_container(payload: dict[str, Any]) -> RawContainer:
    networks = ((payload.get("NetworkSettings") or {}).get("Networks") or {})
    return RawContainer(
        id=payload.get("Id") or "",
        names=tuple(payload.get("Names") or ()),
        image=payload.get("Image") or "",
        state=payload.get("State"),
        status=payload.get("Status"),
        ports=tuple(
            RawPort(
                private_port=int(p.get("PrivatePort") or 0),
                public_port=p.get("PublicPort"),
                type=p.get("Type"),
            )
            for p in payload.get("Ports") or ()
        ),
        networks=tuple(networks.keys()),
        labels=dict(payload.get("Labels") or {}),
        created=payload.get("Created"),
    )


def parse_network(payload: dict[str, Any]) -> RawNetwork:
    return RawNetwork(
        id=payload.get("Id") or "",
        name=payload.get("Name") or "",
        driver=payload.get("Driver"),
        containers=tuple((payload.get("Containers") or {}).keys()),
    )


def parse_image(payload: dict[str, Any]) -> RawImage:
    return RawImage(
        repo_tags=tuple(payload.get("RepoTags") or ()),
        size=int(payload.get("Size") or 0),
    )


def _as_tuple(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def parse_inspect(payload: dict[str, Any]) -> RawInspect:
    config = payload.get("Config") or {}
    health = config.get("Healthcheck")
    return RawInspect(
        env=tuple(config.get("Env") or ()),
        cmd=_as_tuple(config.get("Cmd")),
        entrypoint=_as_tuple(config.get("Entrypoint")),
        working_dir=config.get("WorkingDir"),
        mounts=tuple(
            RawMount(
                source=m.get("Source") or m.get("Name") or "",
                destination=m.get("Destination") or "",
                mode=m.get("Mode") or "",
                rw=bool(m.get("RW", True)),
            )
            for m in payload.get("Mounts") or ()
        ),
        healthcheck=RawHealthcheck(
            test=tuple(health.get("Test") or ()),
            interval=int(health.get("Interval") or 0),
            timeout=int(health.get("Timeout") or 0),
            retries=int(health.get("Retries") or 0),
            start_period=int(health.get("StartPeriod") or 0),
        ) if health else None,
    )


def parse_counters(payload: dict[str, Any], cpu_key: str) -> RawCounters:
    cpu = payload.get(cpu_key) or {}
    cpu_usage = cpu.get("cpu_usage") or {}
    online = int(cpu.get("online_cpus") or 0) or len(cpu_usage.get("percpu_usage") or ())
    memory = payload.get("memory_stats") or {}
    blkio = (payload.get("blkio_stats") or {}).get("io_service_bytes_recursive") or ()
    return RawCounters(
        cpu_total=int(cpu_usage.get("total_usage") or 0),
        system_usage=int(cpu.get("system_cpu_usage") or 0),
        online_cpus=online or 1,
        memory_usage=int(memory.get("usage") or 0),
        memory_limit=memory.get("limit"),
        interfaces=tuple(
            RawInterfaceCounters(
                rx_bytes=int(iface.get("rx_bytes") or 0),
                tx_bytes=int(iface.get("tx_bytes") or 0),
            )
            for iface in (payload.get("networks") or {}).values()
        ),
        block_io=tuple(
            RawBlockIOEntry(op=str(entry.get("op") or ""), value=int(entry.get("value") or 0))
            for entry in blkio
        ),
        pids=int((payload.get("pids_stats") or {}).get("current") or 0),
    )


def parse_stats(payload: dict[str, Any]) -> RawStatsPair:
    # Only cpu counters come in a "pre" flavour; the rest are point-in-time.
    return RawStatsPair(
        current=parse_counters(payload, "cpu_stats"),
        previous=parse_counters(payload, "precpu_stats"),
    )


def parsed(build: Callable[[], T]) -> T:
    """Run a payload parser; a payload of the wrong shape is a daemon failure."""
    try:
        return build()
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise UpstreamUnavailable(f"Malformed daemon response: {e}") from e


class DockerSDKRuntime(ContainerRuntime):
    """ContainerRuntime backed by the Docker SDK, blocking calls run in threads."""

    def __init__(self, settings: Settings | None = None, client: docker.DockerClient | None = None):
        self.settings = settings or Settings()
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def docker_client(self) -> docker.DockerClient:
        # Built on first use, from worker threads: one builder at a time.
        with self._client_lock:
            if self._client is None:
                if self.settings.DOCKER_BASE_URL:
                    self._client = docker.DockerClient(
                        base_url=self.settings.DOCKER_BASE_URL,
                        timeout=self.settings.DOCKER_TIMEOUT_SECONDS,
                    )
                else:
                    self._client = docker.from_env(timeout=self.settings.DOCKER_TIMEOUT_SECONDS)
            return self._client

    async def _call(self, fn: Callable[[], T], allow_missing: bool = False) -> T:
        """
        Run a read call against the daemon in a thread.

        NotFound reaches the caller only with allow_missing; on a listing
        call it is a daemon failure like any other.
        """
        try:
            return await asyncio.to_thread(fn)
        except NotFound as e:
            if allow_missing:
                raise
            raise UpstreamUnavailable(f"Docker daemon error: {e}") from e
        except (DockerException, RequestException) as e:
            raise UpstreamUnavailable(f"Docker daemon error: {e}") from e

    def _api(self):
        return self.docker_client.api

    # -------------------------------
    # Listing
    # -------------------------------
    async def list_containers(self, include_stopped: bool = True) -> List[RawContainer]:
        payloads = await self._call(lambda: self._api().containers(all=include_stopped))
        return parsed(lambda: [parse_container(p) for p in payloads])

    async def list_networks(self) -> List[RawNetwork]:
        networks = await self._call(lambda: self.docker_client.networks.list(greedy=True))
        return parsed(lambda: [parse_network(n.attrs) for n in networks])

    async def list_images(self) -> List[RawImage]:
        payloads = await self._call(lambda: self._api().images())
        return parsed(lambda: [parse_image(p) for p in payloads])

    # -------------------------------
    # Single container
    # -------------------------------
    async def inspect_container(self, container_id: str) -> Optional[RawInspect]:
        try:
            payload = await self._call(
                lambda: self._api().inspect_container(container_id), allow_missing=True
            )
        except NotFound:
            return None
        return parsed(lambda: parse_inspect(payload))

    async def get_stats_once(self, container_id: str) -> Optional[RawStatsPair]:
        try:
            state = await self._call(
                lambda: self._api().inspect_container(container_id), allow_missing=True
            )
            if not parsed(lambda: (state.get("State") or {}).get("Running")):
                return None
            payload = await self._call(
                lambda: self._api().stats(container_id, stream=False), allow_missing=True
            )
        except NotFound:
            return None
        return parsed(lambda: parse_stats(payload))

    async def get_logs(self, container_id: str, tail: int = 100) -> List[str]:
        try:
            raw = await self._call(
                lambda: self._api().logs(container_id, stdout=True, stderr=True, tail=tail),
                allow_missing=True,
            )
        except NotFound:
            raise ContainerNotFound(container_id)
        return parsed(lambda: raw.decode("utf-8", errors="replace").splitlines())

    # -------------------------------
    # Lifecycle
    # -------------------------------
    async def _command(self, fn: Callable[..., None], *args, **kwargs) -> None:
        try:
            await asyncio.to_thread(fn, *args, **kwargs)
        except APIError as e:
            raise ActionRejected(str(e.explanation or e)) from e
        except (DockerException, RequestException) as e:
            raise UpstreamUnavailable(f"Docker daemon error: {e}") from e

    async def restart(self, container_id: str, grace_period: int) -> None:
        await self._command(lambda: self._api().restart(container_id, timeout=grace_period))

    async def stop(self, container_id: str, grace_period: int) -> None:
        await self._command(lambda: self._api().stop(container_id, timeout=grace_period))

    async def start(self, container_id: str) -> None:
        await self._command(lambda: self._api().start(container_id))
