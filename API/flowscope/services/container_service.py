# flowscope/services/container_service.py
import dataclasses
import logging
from typing import List

from flowscope.core.config import Settings
from flowscope.domain.container import (
    ActionResult,
    ContainerDetail,
    ContainerLogs,
    ContainerRecord,
    HealthCheckConfig,
    NetworkInfo,
    ResourceSample,
    VolumeMount,
)
from flowscope.domain.errors import (
    ActionRejected,
    ContainerNotFound,
    FlowchartNotFound,
    UpstreamUnavailable,
)
from flowscope.domain.flowchart import Flowchart, TopologySnapshot
from flowscope.domain.ports import ContainerRuntime
from flowscope.domain.runtime import RawInspect
from flowscope.services import flowchart as synth
from flowscope.services.normalizer import normalize, short_id
from flowscope.services.stats import round2, sample_from_pair, to_mb
from flowscope.services.topology import aggregate

logger = logging.getLogger(__name__)

NANOS_PER_SECOND = 1_000_000_000


class ContainerService:
    """
    Everything the HTTP and push layers ask about the host goes through here.

    Each call reads the runtime afresh and builds new values; nothing is
    cached between calls.
    """

    def __init__(self, runtime: ContainerRuntime, settings: Settings | None = None):
        self.runtime = runtime
        self.settings = settings or Settings()

    # -------------------------------
    # Listing
    # -------------------------------
    async def list_containers(self, with_stats: bool = False) -> List[ContainerRecord]:
        records = normalize(await self.runtime.list_containers(include_stopped=True))
        if not with_stats:
            return records

        sizes = await self._image_sizes_or_empty()
        enriched = []
        for record in records:
            sample = await self.sample(record.id) if record.status.is_up else None
            enriched.append(
                dataclasses.replace(
                    record,
                    stats=sample,
                    image_size_mb=image_size(sizes, record.image),
                )
            )
        return enriched

    async def get_container(self, container_id: str) -> ContainerRecord:
        for record in await self.list_containers():
            if record.matches(container_id):
                return record
        raise ContainerNotFound(container_id)

    async def list_networks(self) -> List[NetworkInfo]:
        return [
            NetworkInfo(
                id=short_id(n.id),
                name=n.name,
                driver=n.driver or "bridge",
                containers=n.containers,
            )
            for n in await self.runtime.list_networks()
        ]

    async def list_image_sizes(self) -> dict[str, float]:
        sizes: dict[str, float] = {}
        for image in await self.runtime.list_images():
            for tag in image.repo_tags:
                if tag and tag != "<none>:<none>":
                    sizes[tag] = round2(to_mb(image.size))
        return sizes

    async def _image_sizes_or_empty(self) -> dict[str, float]:
        try:
            return await self.list_image_sizes()
        except UpstreamUnavailable as e:
            logger.debug(f"Image sizes unavailable, skipping: {e}")
            return {}

    # -------------------------------
    # Topology and flowcharts
    # -------------------------------
    async def topology(self) -> TopologySnapshot:
        return aggregate(await self.list_containers())

    async def flowchart(self, view_id: str, with_stats: bool = False) -> Flowchart:
        records = await self.list_containers()
        chart = synth.resolve_view(view_id, records)
        if chart is None:
            raise FlowchartNotFound(view_id)
        if with_stats and chart.id != synth.SYSTEM_OVERVIEW_ID:
            chart = await synth.attach_stats(chart, records, self.sample)
        return chart

    # -------------------------------
    # Single container
    # -------------------------------
    async def sample(self, container_id: str) -> ResourceSample | None:
        """Best-effort resource sample; any failure means no sample."""
        try:
            pair = await self.runtime.get_stats_once(container_id)
        except UpstreamUnavailable as e:
            logger.debug(f"No stats for {container_id}: {e}")
            return None
        return sample_from_pair(pair) if pair is not None else None

    async def get_container_stats(self, container_id: str) -> ResourceSample:
        record = await self.get_container(container_id)
        sample = await self.sample(record.id)
        if sample is None:
            raise ContainerNotFound(container_id, "Container not found or not running")
        return sample

    async def get_container_detail(self, container_id: str) -> ContainerDetail:
        record = await self.get_container(container_id)
        inspect = await self.runtime.inspect_container(record.id)
        if inspect is None:
            raise ContainerNotFound(container_id)
        return build_detail(record, inspect)

    async def get_container_logs(self, container_id: str, tail: int | None = None) -> ContainerLogs:
        tail = tail if tail is not None else self.settings.DEFAULT_LOG_TAIL
        tail = max(1, min(tail, self.settings.MAX_LOG_TAIL))
        record = await self.get_container(container_id)
        lines = await self.runtime.get_logs(record.id, tail)
        return ContainerLogs(
            container_id=record.id,
            container_name=record.name,
            logs=tuple(lines),
            tail=tail,
        )

    # -------------------------------
    # Lifecycle
    # -------------------------------
    async def restart_container(self, container_id: str) -> ActionResult:
        grace = self.settings.ACTION_GRACE_PERIOD_SECONDS
        return await self._run_action(
            container_id, "restart", lambda cid: self.runtime.restart(cid, grace)
        )

    async def stop_container(self, container_id: str) -> ActionResult:
        grace = self.settings.ACTION_GRACE_PERIOD_SECONDS
        return await self._run_action(
            container_id, "stop", lambda cid: self.runtime.stop(cid, grace)
        )

    async def start_container(self, container_id: str) -> ActionResult:
        return await self._run_action(container_id, "start", self.runtime.start)

    async def _run_action(self, container_id: str, action: str, command) -> ActionResult:
        """
        Send one lifecycle command. A refusal from the daemon comes back as
        success=False rather than an exception; no retry is attempted.
        """
        record = await self.get_container(container_id)
        try:
            await command(record.id)
        except ActionRejected as e:
            logger.warning(f"[{action.upper()}] {record.name} rejected: {e}")
            return ActionResult(
                success=False,
                container_id=record.id,
                container_name=record.name,
                action=action,
                message=f"Failed to {action} container: {e}",
            )

        logger.info(f"[{action.upper()}] {record.name} ({record.id})")
        return ActionResult(
            success=True,
            container_id=record.id,
            container_name=record.name,
            action=action,
            message=f"Container {record.name} {_PAST_TENSE[action]} successfully",
        )


_PAST_TENSE = {"restart": "restarted", "stop": "stopped", "start": "started"}


def image_size(sizes: dict[str, float], image: str) -> float | None:
    if image in sizes:
        return sizes[image]
    # untagged references resolve to :latest
    if ":" not in image.rsplit("/", 1)[-1]:
        return sizes.get(f"{image}:latest")
    return None


def build_detail(record: ContainerRecord, inspect: RawInspect) -> ContainerDetail:
    health = inspect.healthcheck
    return ContainerDetail(
        info=record,
        environment=inspect.env,
        command=" ".join(inspect.cmd) if inspect.cmd else None,
        entrypoint=inspect.entrypoint or None,
        working_dir=inspect.working_dir or None,
        volumes=tuple(
            VolumeMount(
                source=m.source,
                destination=m.destination,
                mode=m.mode or ("rw" if m.rw else "ro"),
            )
            for m in inspect.mounts
        ),
        health_check=HealthCheckConfig(
            test=health.test,
            interval_seconds=health.interval // NANOS_PER_SECOND,
            timeout_seconds=health.timeout // NANOS_PER_SECOND,
            retries=health.retries,
            start_period_seconds=health.start_period // NANOS_PER_SECOND,
        ) if health else None,
    )
