"""
droplet_monitor.model

Per-cycle data model: hosts, time series, and the per-host snapshot.

Design goals:
- Nothing outlives a polling cycle
- Every metric on a snapshot is independently optional (None = not available)
- Explicit structure for JSON output (no accidental serialization via __dict__)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from droplet_monitor.percent import percentage, to_gb

ROOT_MOUNTPOINT = "/"


@dataclass(frozen=True)
class Host:
    """
    Managed droplet as returned by the listing endpoint
    """

    id: str
    name: str
    size: str

    @staticmethod
    def from_api(payload: dict[str, Any]) -> "Host":
        if not isinstance(payload, dict):
            raise ValueError(f"droplet entry is {type(payload).__name__}, expected object")
        if "id" not in payload:
            raise ValueError("droplet payload has no id")
        return Host(
            id=str(payload["id"]),
            name=str(payload.get("name") or ""),
            size=str(payload.get("size_slug") or ""),
        )


@dataclass(frozen=True)
class Series:
    """
    One named time series: labels (mode, device, mountpoint, ...) and
    chronologically ordered [timestamp, value] samples
    """

    labels: dict[str, str]
    values: list[tuple[float, str]]

    @staticmethod
    def from_api(payload: dict[str, Any]) -> "Series":
        labels = payload.get("metric") or {}
        values = payload.get("values") or []
        if not isinstance(labels, dict) or not isinstance(values, list):
            raise ValueError("series payload must carry 'metric' dict and 'values' list")
        return Series(
            labels={str(k): str(v) for k, v in labels.items()},
            values=[(float(ts), str(val)) for ts, val in values],
        )

    def latest(self) -> Optional[str]:
        if not self.values:
            return None
        return self.values[-1][1]


@dataclass(frozen=True)
class Usage:
    used_bytes: float
    total_bytes: float

    @property
    def percent(self) -> str:
        return percentage(self.used_bytes, self.total_bytes)

    def describe(self) -> str:
        """
        "60.00% (60.00GB/100.00GB)"
        """
        return f"{self.percent}% ({to_gb(self.used_bytes)}GB/{to_gb(self.total_bytes)}GB)"

    def to_dict(self) -> dict[str, Any]:
        return {
            "used_bytes": self.used_bytes,
            "total_bytes": self.total_bytes,
            "percent": float(self.percent),
        }


@dataclass(frozen=True)
class CpuUsage:
    # active = user + system
    active: float
    total: float

    @property
    def percent(self) -> str:
        return percentage(self.active, self.total)

    def describe(self) -> str:
        return f"{self.percent}%"


@dataclass(frozen=True)
class FilesystemUsage:
    device: str
    mountpoint: str
    usage: Usage

    def to_dict(self) -> dict[str, Any]:
        return {
            "device": self.device,
            "mountpoint": self.mountpoint,
            **self.usage.to_dict(),
        }


@dataclass
class MetricSnapshot:
    """
    Metrics captured for one host within one polling cycle

    - fields stay None until their collector succeeds with data
    - reasons: "collector_failed:<metric>" tags, sorted on output
    """

    name: str
    size: str
    cpu: Optional[CpuUsage] = None
    memory: Optional[Usage] = None
    load_5: Optional[str] = None
    filesystems: list[FilesystemUsage] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)

    @property
    def filesystem(self) -> Optional[Usage]:
        """
        Root filesystem usage; other mountpoints are kept but not surfaced here
        """
        for fs in self.filesystems:
            if fs.mountpoint == ROOT_MOUNTPOINT:
                return fs.usage
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "cpu_percent": float(self.cpu.percent) if self.cpu else None,
            "memory": self.memory.to_dict() if self.memory else None,
            "load_5": self.load_5,
            "filesystem": self.filesystem.to_dict() if self.filesystem else None,
            "filesystems": [fs.to_dict() for fs in self.filesystems],
            "reasons": sorted(self.reasons),
        }
