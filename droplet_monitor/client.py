"""
droplet_monitor.client

Read-only client for the DigitalOcean droplet and monitoring endpoints.

Failure semantics:
- any transport error, non-2xx status or malformed body raises TransportError
- no retries; the next polling tick is the retry
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from droplet_monitor.model import Host, Series
from droplet_monitor.version import MONITOR_VERSION

DROPLETS_PATH = "/droplets"
METRIC_PATH = "/monitoring/metrics/droplet/{metric}"
DROPLETS_PER_PAGE = 200

METRIC_CPU = "cpu"
METRIC_MEMORY_AVAILABLE = "memory_available"
METRIC_MEMORY_TOTAL = "memory_total"
METRIC_LOAD_5 = "load_5"
METRIC_FILESYSTEM_SIZE = "filesystem_size"
METRIC_FILESYSTEM_FREE = "filesystem_free"


class TransportError(RuntimeError):
    """Raised when the API could not be reached or answered badly."""


def _iso_z(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _next_page(payload: dict[str, Any]) -> Optional[str]:
    links = payload.get("links")
    if links is None:
        return None
    if not isinstance(links, dict):
        raise TransportError("malformed pagination links")
    pages = links.get("pages")
    if pages is None:
        return None
    if not isinstance(pages, dict):
        raise TransportError("malformed pagination links")
    next_url = pages.get("next")
    if next_url is not None and not isinstance(next_url, str):
        raise TransportError("malformed pagination links")
    return next_url or None


@dataclass(frozen=True)
class MetricWindow:
    """
    Query window shared by every metric request in one cycle
    """

    start: str
    end: str
    granularity: str = "1m"

    @classmethod
    def trailing(cls, seconds: int, *, granularity: str = "1m", now: Optional[datetime] = None) -> "MetricWindow":
        end = now or datetime.now(timezone.utc)
        start = end - timedelta(seconds=seconds)
        return cls(start=_iso_z(start), end=_iso_z(end), granularity=granularity)

    def to_params(self, host_id: str) -> dict[str, str]:
        return {
            "host_id": host_id,
            "start": self.start,
            "end": self.end,
            "granularity": self.granularity,
        }


class MonitoringClient:
    """
    Thin async wrapper around one shared httpx.AsyncClient

    transport: injectable for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": f"droplet-monitor/{MONITOR_VERSION}",
            },
        )

    async def __aenter__(self) -> "MonitoringClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        try:
            response = await self._http.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"GET {e.request.url.path} -> HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise TransportError(f"GET {url} returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise TransportError(f"GET {url} returned {type(payload).__name__}, expected object")
        return payload

    async def list_hosts(self) -> list[Host]:
        """
        Enumerate every droplet on the account, following pagination links

        A malformed body or a pagination loop raises TransportError
        """
        hosts: list[Host] = []
        url: Optional[str] = DROPLETS_PATH
        params: Optional[dict[str, Any]] = {"per_page": DROPLETS_PER_PAGE}
        visited: set[str] = set()

        while url:
            visited.add(url)
            payload = await self._get_json(url, params)
            droplets = payload.get("droplets")
            if not isinstance(droplets, list):
                raise TransportError("droplet listing has no 'droplets' list")
            try:
                hosts.extend(Host.from_api(d) for d in droplets)
            except (TypeError, ValueError) as e:
                raise TransportError(f"malformed droplet entry: {e}") from e

            # next link is absolute and already carries the query string
            url = _next_page(payload)
            params = None
            if url in visited:
                raise TransportError(f"pagination loop: {url} was already fetched")

        return hosts

    async def query_metric(self, metric: str, window: MetricWindow, host_id: str) -> list[Series]:
        payload = await self._get_json(METRIC_PATH.format(metric=metric), window.to_params(host_id))
        try:
            result = payload["data"]["result"]
            return [Series.from_api(item) for item in result]
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"malformed {metric} response: {type(e).__name__}: {e}") from e
