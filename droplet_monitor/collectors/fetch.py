"""
droplet_monitor.collectors.fetch

Per-host metrics assembly

Contract:
- never raises; every collector failure is logged and recorded as a reason
- collectors for one host run one after another, each isolated from the rest
- a failing collector leaves only its own field unset
"""

from __future__ import annotations

from droplet_monitor.client import MetricWindow, MonitoringClient
from droplet_monitor.collectors.base import run_collector
from droplet_monitor.collectors.cpu import collect_cpu
from droplet_monitor.collectors.disk import collect_filesystems
from droplet_monitor.collectors.load import collect_load
from droplet_monitor.collectors.memory import collect_memory
from droplet_monitor.logging import emit_event
from droplet_monitor.model import Host, MetricSnapshot
from droplet_monitor.version import MONITOR_VERSION

# Awaited in this order for each host
COLLECTORS = (
    ("cpu", collect_cpu),
    ("memory", collect_memory),
    ("filesystem", collect_filesystems),
    ("load_5", collect_load),
)


async def fetch_metrics(client: MonitoringClient, host: Host, window: MetricWindow) -> MetricSnapshot:
    snapshot = MetricSnapshot(name=host.name, size=host.size)

    for name, fn in COLLECTORS:
        out = await run_collector(name, fn, client, host.id, window)

        if not out.ok:
            emit_event(
                "collector_failed",
                monitor_version=MONITOR_VERSION,
                collector=name,
                host_id=host.id,
                host_name=host.name,
                error_type=out.error_type,
                message=out.error_message,
            )
            snapshot.reasons.append(f"collector_failed:{name}")
            continue

        if out.value is None:
            continue

        if name == "cpu":
            snapshot.cpu = out.value
        elif name == "memory":
            snapshot.memory = out.value
        elif name == "filesystem":
            snapshot.filesystems = out.value
        elif name == "load_5":
            snapshot.load_5 = out.value

    return snapshot
