"""
droplet_monitor.collectors.load

5-minute load average, first series only, raw API string
"""

from __future__ import annotations

from typing import Optional

from droplet_monitor.client import METRIC_LOAD_5, MetricWindow, MonitoringClient


async def collect_load(client: MonitoringClient, host_id: str, window: MetricWindow) -> Optional[str]:
    series = await client.query_metric(METRIC_LOAD_5, window, host_id)
    if not series:
        return None
    return series[0].latest()
