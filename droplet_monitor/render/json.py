"""
droplet_monitor.render.json

Machine-readable renderer, one JSON document per cycle
"""

from __future__ import annotations

import json
from typing import Optional

from droplet_monitor.render.base import Renderer


class JsonRenderer(Renderer):
    name = "json"

    def render(self, snapshots, *, meta: Optional[dict] = None) -> str:
        hosts = [snapshot.to_dict() for snapshot in snapshots]
        payload = {
            "meta": {**(meta or {}), "hosts": len(hosts)},
            "hosts": hosts,
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
