"""
droplet_monitor.collectors.disk

Filesystem collector
- filesystem_size and filesystem_free are joined on (device, mountpoint),
  never on response order
- unpaired or zero-sized entries are skipped
"""

from __future__ import annotations

from droplet_monitor.client import (
    METRIC_FILESYSTEM_FREE,
    METRIC_FILESYSTEM_SIZE,
    MetricWindow,
    MonitoringClient,
)
from droplet_monitor.model import FilesystemUsage, Series, Usage

FsKey = tuple[str, str]


def _latest_by_key(series: list[Series]) -> dict[FsKey, float]:
    values: dict[FsKey, float] = {}
    for s in series:
        latest = s.latest()
        if latest is None:
            continue
        key = (s.labels.get("device", ""), s.labels.get("mountpoint", ""))
        values[key] = float(latest)
    return values


def pair_filesystems(size_series: list[Series], free_series: list[Series]) -> list[FilesystemUsage]:
    """
    Join size and free samples per (device, mountpoint); order follows size_series
    """
    sizes = _latest_by_key(size_series)
    frees = _latest_by_key(free_series)

    paired: list[FilesystemUsage] = []
    for (device, mountpoint), size in sizes.items():
        free = frees.get((device, mountpoint))
        if free is None or not size:
            continue
        paired.append(
            FilesystemUsage(
                device=device,
                mountpoint=mountpoint,
                usage=Usage(used_bytes=size - free, total_bytes=size),
            )
        )
    return paired


async def collect_filesystems(client: MonitoringClient, host_id: str, window: MetricWindow) -> list[FilesystemUsage]:
    size_series = await client.query_metric(METRIC_FILESYSTEM_SIZE, window, host_id)
    free_series = await client.query_metric(METRIC_FILESYSTEM_FREE, window, host_id)
    return pair_filesystems(size_series, free_series)
