"""
droplet_monitor.render.utils

Cell text for table rows; absent metrics become display sentinels here
"""

from __future__ import annotations

from dataclasses import dataclass

from droplet_monitor.model import MetricSnapshot
from droplet_monitor.percent import parse_percentage, progress_bar

NOT_AVAILABLE = "N/A"


def format_cpu(snapshot: MetricSnapshot) -> str:
    if snapshot.cpu is None:
        return NOT_AVAILABLE
    return snapshot.cpu.describe()


def format_memory(snapshot: MetricSnapshot) -> str:
    if snapshot.memory is None:
        return NOT_AVAILABLE
    return snapshot.memory.describe()


def format_load(snapshot: MetricSnapshot) -> str:
    if snapshot.load_5 is None:
        return NOT_AVAILABLE
    return snapshot.load_5


def format_filesystem(snapshot: MetricSnapshot) -> str:
    usage = snapshot.filesystem
    if usage is None:
        return ""
    return usage.describe()


def meter_cell(text: str) -> list[str]:
    """
    Value line, plus a bar line when a percentage can be read back out of it
    """
    pct = parse_percentage(text)
    if pct is None:
        return [text]
    return [text, progress_bar(pct)]


@dataclass(frozen=True)
class RenderRow:
    """
    One table row; each cell is a list of lines
    """

    name: list[str]
    size: list[str]
    cpu: list[str]
    memory: list[str]
    load_5: list[str]
    filesystem: list[str]

    @staticmethod
    def from_snapshot(snapshot: MetricSnapshot) -> "RenderRow":
        return RenderRow(
            name=[snapshot.name],
            size=[snapshot.size],
            cpu=meter_cell(format_cpu(snapshot)),
            memory=meter_cell(format_memory(snapshot)),
            load_5=[format_load(snapshot)],
            filesystem=meter_cell(format_filesystem(snapshot)),
        )

    def cells(self) -> list[list[str]]:
        return [self.name, self.size, self.cpu, self.memory, self.load_5, self.filesystem]
