"""
droplet_monitor.collectors.memory

Memory collector
- latest of memory_available and memory_total, queried independently
- either missing or zero -> no data
"""

from __future__ import annotations

from typing import Optional

from droplet_monitor.client import (
    METRIC_MEMORY_AVAILABLE,
    METRIC_MEMORY_TOTAL,
    MetricWindow,
    MonitoringClient,
)
from droplet_monitor.model import Series, Usage


def _first_latest(series: list[Series]) -> float:
    if not series:
        return 0.0
    latest = series[0].latest()
    return float(latest) if latest is not None else 0.0


async def collect_memory(client: MonitoringClient, host_id: str, window: MetricWindow) -> Optional[Usage]:
    available = _first_latest(await client.query_metric(METRIC_MEMORY_AVAILABLE, window, host_id))
    total = _first_latest(await client.query_metric(METRIC_MEMORY_TOTAL, window, host_id))

    if not available or not total:
        return None
    return Usage(used_bytes=total - available, total_bytes=total)
