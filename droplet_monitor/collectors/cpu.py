"""
droplet_monitor.collectors.cpu

CPU collector
- latest sample per mode; idle vs user+system
- other modes (iowait, steal, ...) are ignored
"""

from __future__ import annotations

from typing import Optional

from droplet_monitor.client import METRIC_CPU, MetricWindow, MonitoringClient
from droplet_monitor.model import CpuUsage

IDLE_MODES = {"idle"}
ACTIVE_MODES = {"user", "system"}


async def collect_cpu(client: MonitoringClient, host_id: str, window: MetricWindow) -> Optional[CpuUsage]:
    series = await client.query_metric(METRIC_CPU, window, host_id)

    total_idle = 0.0
    total_active = 0.0
    for s in series:
        latest = s.latest()
        if latest is None:
            continue
        mode = s.labels.get("mode")
        if mode in IDLE_MODES:
            total_idle += float(latest)
        elif mode in ACTIVE_MODES:
            total_active += float(latest)

    total = total_idle + total_active
    if total == 0:
        return None
    return CpuUsage(active=total_active, total=total)
