"""
droplet_monitor.render.base

Renderer interface
"""

from __future__ import annotations

from typing import Iterable, Optional

from droplet_monitor.model import MetricSnapshot


class Renderer:
    name: str = "base"

    def render(self, snapshots: Iterable[MetricSnapshot], *, meta: Optional[dict] = None) -> str:
        raise NotImplementedError
