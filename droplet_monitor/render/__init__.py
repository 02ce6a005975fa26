"""droplet_monitor.render registry."""

from __future__ import annotations

from droplet_monitor.render.base import Renderer
from droplet_monitor.render.json import JsonRenderer
from droplet_monitor.render.table import TableRenderer

RENDERER_NAMES = ("table", "json")


def get_renderer(name: str, *, color: bool = True) -> Renderer:
    if name == "table":
        return TableRenderer(color=color)
    if name == "json":
        return JsonRenderer()
    raise ValueError(f"unknown renderer: {name}")
