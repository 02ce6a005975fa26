"""
droplet_monitor.poll

Polling orchestration

- one cycle: enumerate hosts -> fetch every host concurrently -> hand off
- host enumeration failure skips the cycle; the loop keeps running
- cycles never overlap: the next one starts after the previous one returns
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from droplet_monitor.client import MetricWindow, MonitoringClient, TransportError
from droplet_monitor.collectors.fetch import fetch_metrics
from droplet_monitor.logging import emit_event
from droplet_monitor.model import Host, MetricSnapshot
from droplet_monitor.version import MONITOR_VERSION


async def run_cycle(
    client: MonitoringClient,
    *,
    window_s: int,
    max_concurrency: int,
) -> Optional[list[MetricSnapshot]]:
    """
    Run one polling cycle

    Returns snapshots in enumeration order, or None when hosts could not be listed
    """
    try:
        hosts = await client.list_hosts()
    except TransportError as e:
        emit_event(
            "host_list_failed",
            monitor_version=MONITOR_VERSION,
            error_type=type(e).__name__,
            message=str(e),
        )
        return None

    window = MetricWindow.trailing(window_s)
    gate = asyncio.Semaphore(max(1, max_concurrency))

    async def _fetch(host: Host) -> MetricSnapshot:
        async with gate:
            return await fetch_metrics(client, host, window)

    # gather keeps input order
    return list(await asyncio.gather(*(_fetch(h) for h in hosts)))


async def poll_forever(
    client: MonitoringClient,
    on_snapshots: Callable[[list[MetricSnapshot]], None],
    *,
    interval_s: int,
    max_concurrency: int,
    max_cycles: Optional[int] = None,
) -> int:
    """
    Run cycles every interval_s seconds, measured from each cycle's start

    An overrunning cycle is followed immediately by the next one.
    Returns the number of cycles that produced snapshots.
    """
    cycles = 0
    rendered = 0

    while max_cycles is None or cycles < max_cycles:
        start = time.monotonic()

        snapshots = await run_cycle(client, window_s=interval_s, max_concurrency=max_concurrency)
        cycles += 1

        if snapshots is not None:
            try:
                on_snapshots(snapshots)
                rendered += 1
            except Exception as e:
                emit_event(
                    "render_failed",
                    monitor_version=MONITOR_VERSION,
                    error_type=type(e).__name__,
                    message=str(e),
                )

        elapsed = time.monotonic() - start
        sleep_s = max(0.0, interval_s - elapsed)

        emit_event(
            "cycle_completed",
            monitor_version=MONITOR_VERSION,
            cycle=cycles,
            hosts=len(snapshots) if snapshots is not None else None,
            degraded_hosts=sum(1 for s in snapshots if s.reasons) if snapshots else 0,
            cycle_elapsed_ms=int(elapsed * 1000),
            sleep_ms=int(sleep_s * 1000),
            overrun=elapsed > interval_s,
            skipped=snapshots is None,
        )

        if max_cycles is not None and cycles >= max_cycles:
            break
        await asyncio.sleep(sleep_s)

    return rendered
