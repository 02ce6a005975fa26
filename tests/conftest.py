"""
Shared fake DigitalOcean API for client, collector, poll and CLI tests
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from droplet_monitor.client import MonitoringClient

BASE_URL = "https://api.test/v2"
GIB = 1024 ** 3


def series(labels: dict[str, str], *values: float) -> dict[str, Any]:
    """
    One API series; samples get ascending timestamps
    """
    return {
        "metric": labels,
        "values": [[1700000000 + i * 60, str(v)] for i, v in enumerate(values)],
    }


def healthy_metrics() -> dict[str, Any]:
    return {
        "cpu": [
            series({"mode": "idle"}, 70),
            series({"mode": "user"}, 20),
            series({"mode": "system"}, 10),
        ],
        "memory_available": [series({}, 1 * GIB)],
        "memory_total": [series({}, 2 * GIB)],
        "filesystem_size": [series({"device": "/dev/vda1", "mountpoint": "/"}, 100 * GIB)],
        "filesystem_free": [series({"device": "/dev/vda1", "mountpoint": "/"}, 40 * GIB)],
        "load_5": [series({}, 0.42)],
    }


class FakeApi:
    """
    metrics[host_id][metric] is a result list, an int status code, or an exception
    """

    def __init__(self) -> None:
        self.droplets: list[dict[str, Any]] = []
        self.droplets_status = 200
        # consumed one per listing request before droplets_status applies
        self.droplets_statuses: list[int] = []
        self.droplets_body: dict[str, Any] | None = None
        self.next_page: str | None = None
        self.pages: dict[str, list[dict[str, Any]]] = {}
        self.metrics: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.delay = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def add_host(self, host_id: int, name: str, size: str = "s-1vcpu-1gb", metrics=None) -> None:
        self.droplets.append({"id": host_id, "name": name, "size_slug": size})
        self.metrics[str(host_id)] = healthy_metrics() if metrics is None else metrics

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/droplets"):
            status = self.droplets_statuses.pop(0) if self.droplets_statuses else self.droplets_status
            if status != 200:
                return httpx.Response(status, json={"id": "unauthorized"})
            if self.droplets_body is not None:
                return httpx.Response(200, json=self.droplets_body)
            page = request.url.params.get("page")
            if page is not None:
                return httpx.Response(200, json={"droplets": self.pages[page], "links": {}})
            links = {"pages": {"next": self.next_page}} if self.next_page else {}
            return httpx.Response(200, json={"droplets": self.droplets, "links": links})

        metric = path.rsplit("/", 1)[-1]
        host_id = request.url.params["host_id"]

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        answer = self.metrics.get(host_id, {}).get(metric, [])
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, int):
            return httpx.Response(answer, text="boom")
        return httpx.Response(200, json={"status": "success", "data": {"resultType": "matrix", "result": answer}})

    def client(self) -> MonitoringClient:
        return MonitoringClient(
            "test-token",
            base_url=BASE_URL,
            timeout=5.0,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()
