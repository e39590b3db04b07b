from decimal import Decimal, ROUND_HALF_UP

from flowscope.domain.container import ResourceSample
from flowscope.domain.runtime import RawCounters, RawStatsPair

BYTES_PER_MB = 1024 * 1024
_CENTS = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero (123.456789 -> 123.46)."""
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def to_mb(num_bytes: int | float) -> float:
    return num_bytes / BYTES_PER_MB


def cpu_percent(curr: RawCounters, prev: RawCounters) -> float:
    cpu_delta = max(0, curr.cpu_total - prev.cpu_total)
    system_delta = max(0, curr.system_usage - prev.system_usage)
    if cpu_delta <= 0 or system_delta <= 0:
        return 0.0
    return (cpu_delta / system_delta) * curr.online_cpus * 100.0


def block_io_bytes(counters: RawCounters) -> tuple[int, int]:
    read_bytes = 0
    write_bytes = 0
    for entry in counters.block_io:
        op = entry.op.lower()
        if op == "read":
            read_bytes += entry.value
        elif op == "write":
            write_bytes += entry.value
    return read_bytes, write_bytes


def compute_sample(curr: RawCounters, prev: RawCounters) -> ResourceSample:
    """Turn one current/previous counter pair into a rounded ResourceSample."""
    usage_mb = to_mb(curr.memory_usage)
    limit_mb = to_mb(curr.memory_limit or 0)
    memory_percent = (usage_mb / limit_mb) * 100.0 if limit_mb > 0 else 0.0

    rx = sum(iface.rx_bytes for iface in curr.interfaces)
    tx = sum(iface.tx_bytes for iface in curr.interfaces)
    read_bytes, write_bytes = block_io_bytes(curr)

    return ResourceSample(
        cpu_percent=round2(cpu_percent(curr, prev)),
        memory_usage_mb=round2(usage_mb),
        memory_limit_mb=round2(limit_mb),
        memory_percent=round2(memory_percent),
        network_rx_mb=round2(to_mb(rx)),
        network_tx_mb=round2(to_mb(tx)),
        block_read_mb=round2(to_mb(read_bytes)),
        block_write_mb=round2(to_mb(write_bytes)),
        pid_count=curr.pids,
    )


def sample_from_pair(pair: RawStatsPair) -> ResourceSample:
    return compute_sample(pair.current, pair.previous)
