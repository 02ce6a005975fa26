"""
Contract tests for the polling cycle and loop
"""

import asyncio
import json

import pytest

from droplet_monitor.poll import poll_forever, run_cycle


def _events(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


@pytest.mark.asyncio
async def test_run_cycle_keeps_enumeration_order(fake_api) -> None:
    for i, name in enumerate(["zeta", "alpha", "mid"]):
        fake_api.add_host(i + 1, name)

    async with fake_api.client() as client:
        snapshots = await run_cycle(client, window_s=30, max_concurrency=8)

    assert [s.name for s in snapshots] == ["zeta", "alpha", "mid"]


@pytest.mark.asyncio
async def test_run_cycle_host_list_failure_skips_cycle(fake_api, capsys) -> None:
    fake_api.droplets_status = 503

    async with fake_api.client() as client:
        snapshots = await run_cycle(client, window_s=30, max_concurrency=8)

    assert snapshots is None
    events = _events(capsys.readouterr().err)
    assert [e["event_type"] for e in events] == ["host_list_failed"]
    assert events[0]["error_type"] == "TransportError"


@pytest.mark.asyncio
async def test_run_cycle_with_no_hosts(fake_api) -> None:
    async with fake_api.client() as client:
        snapshots = await run_cycle(client, window_s=30, max_concurrency=8)

    assert snapshots == []


@pytest.mark.asyncio
async def test_run_cycle_bounds_concurrent_hosts(fake_api) -> None:
    """
    No more than max_concurrency hosts have a request in flight at once
    """
    for i in range(6):
        fake_api.add_host(i + 1, f"host-{i}")
    fake_api.delay = 0.01

    async with fake_api.client() as client:
        snapshots = await run_cycle(client, window_s=30, max_concurrency=2)

    assert len(snapshots) == 6
    assert fake_api.max_in_flight == 2


@pytest.mark.asyncio
async def test_poll_forever_single_cycle_hands_off_snapshots(fake_api, capsys) -> None:
    fake_api.add_host(1, "web-1")
    seen: list[list] = []

    async with fake_api.client() as client:
        rendered = await poll_forever(client, seen.append, interval_s=30, max_concurrency=4, max_cycles=1)

    assert rendered == 1
    assert [s.name for s in seen[0]] == ["web-1"]

    tick = _events(capsys.readouterr().err)[-1]
    assert tick["event_type"] == "cycle_completed"
    assert tick["hosts"] == 1
    assert tick["skipped"] is False
    assert isinstance(tick["cycle_elapsed_ms"], int)
    assert isinstance(tick["overrun"], bool)


@pytest.mark.asyncio
async def test_poll_forever_survives_render_failure(fake_api, capsys) -> None:
    fake_api.add_host(1, "web-1")

    def _explode(snapshots) -> None:
        raise RuntimeError("terminal gone")

    async with fake_api.client() as client:
        rendered = await poll_forever(client, _explode, interval_s=30, max_concurrency=4, max_cycles=1)

    assert rendered == 0
    kinds = [e["event_type"] for e in _events(capsys.readouterr().err)]
    assert kinds == ["render_failed", "cycle_completed"]


@pytest.mark.asyncio
async def test_poll_forever_recovers_after_failed_listing(fake_api, capsys) -> None:
    """
    A failed enumeration skips one cycle; the next cycle renders
    """
    fake_api.add_host(1, "web-1")
    fake_api.droplets_statuses = [503]
    seen: list[list] = []

    async with fake_api.client() as client:
        rendered = await poll_forever(client, seen.append, interval_s=0, max_concurrency=4, max_cycles=2)

    assert rendered == 1
    assert [s.name for s in seen[0]] == ["web-1"]

    events = _events(capsys.readouterr().err)
    assert [e["event_type"] for e in events] == ["host_list_failed", "cycle_completed", "cycle_completed"]
    assert events[1]["skipped"] is True and events[1]["hosts"] is None
    assert events[2]["skipped"] is False and events[2]["hosts"] == 1


@pytest.mark.asyncio
async def test_poll_forever_survives_malformed_listing(fake_api, capsys) -> None:
    fake_api.droplets_body = {"droplets": [], "links": {"pages": "x"}}
    seen: list[list] = []

    async with fake_api.client() as client:
        rendered = await poll_forever(client, seen.append, interval_s=0, max_concurrency=4, max_cycles=2)

    assert rendered == 0
    assert seen == []
    kinds = [e["event_type"] for e in _events(capsys.readouterr().err)]
    assert kinds.count("host_list_failed") == 2
    assert kinds.count("cycle_completed") == 2


@pytest.mark.asyncio
async def test_cycles_do_not_overlap(fake_api, capsys) -> None:
    """
    The second listing is requested only after every metric request of the first cycle
    """
    fake_api.add_host(1, "web-1")
    fake_api.add_host(2, "web-2")
    fake_api.delay = 0.01

    async with fake_api.client() as client:
        rendered = await poll_forever(client, lambda s: None, interval_s=0, max_concurrency=4, max_cycles=2)

    assert rendered == 2
    paths = [r.url.path for r in fake_api.requests]
    listing = [i for i, p in enumerate(paths) if p.endswith("/droplets")]
    assert listing == [0, 13]
    assert len(paths) == 26

    ticks = [e for e in _events(capsys.readouterr().err) if e["event_type"] == "cycle_completed"]
    assert [t["cycle"] for t in ticks] == [1, 2]
    for tick in ticks:
        # slower than a zero-second interval: flagged, no sleep
        assert tick["overrun"] is True
        assert tick["sleep_ms"] == 0
        assert tick["cycle_elapsed_ms"] >= 10


@pytest.mark.asyncio
async def test_sleep_is_measured_from_cycle_start(fake_api, capsys, monkeypatch) -> None:
    fake_api.add_host(1, "web-1")
    sleeps: list[float] = []

    async def _no_wait(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", _no_wait)

    async with fake_api.client() as client:
        await poll_forever(client, lambda s: None, interval_s=30, max_concurrency=4, max_cycles=2)

    # one sleep between the two cycles, never after the last
    assert len(sleeps) == 1
    assert 29.0 < sleeps[0] <= 30.0

    ticks = [e for e in _events(capsys.readouterr().err) if e["event_type"] == "cycle_completed"]
    assert all(t["overrun"] is False for t in ticks)
