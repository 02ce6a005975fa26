"""
droplet_monitor.render.table

Fixed-width box table with progress bars in the CPU/Memory/File Storage cells
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from droplet_monitor.render.base import Renderer
from droplet_monitor.render.utils import RenderRow

ELLIPSIS = "…"


@dataclass(frozen=True)
class Column:
    header: str
    # total width including one space of padding on each side
    width: int
    style: Optional[dict] = None
    meter: bool = False


BOLD = {"bold": True}
BAR_STYLE = {"fg": typer.colors.CYAN}

COLUMNS = (
    Column("Name", 25, style=BOLD),
    Column("Size", 15, style=BOLD),
    Column("CPU", 25, meter=True),
    Column("Memory", 30, meter=True),
    Column("Load 5m", 10, style={"fg": typer.colors.YELLOW}),
    Column("File Storage", 30, meter=True),
)


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    if width <= 1:
        return ELLIPSIS[:width]
    return text[: width - 1] + ELLIPSIS


def _border(left: str, mid: str, right: str) -> str:
    return left + mid.join("─" * col.width for col in COLUMNS) + right


class TableRenderer(Renderer):
    name = "table"

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _line(self, text: str, col: Column, style: Optional[dict]) -> str:
        inner = col.width - 2
        text = _truncate(text, inner)
        pad = " " * (inner - len(text))
        if self.color and style and text:
            text = typer.style(text, **style)
        return f" {text}{pad} "

    def _row_lines(self, cells: list[list[str]], *, header: bool = False) -> list[str]:
        height = max(len(cell) for cell in cells)
        lines: list[str] = []
        for i in range(height):
            parts = []
            for col, cell in zip(COLUMNS, cells):
                text = cell[i] if i < len(cell) else ""
                if header:
                    style = BOLD
                elif col.meter and i > 0:
                    style = BAR_STYLE
                else:
                    style = col.style
                parts.append(self._line(text, col, style))
            lines.append("│" + "│".join(parts) + "│")
        return lines

    def render(self, snapshots, *, meta: Optional[dict] = None) -> str:
        lines = [_border("┌", "┬", "┐")]
        lines.extend(self._row_lines([[col.header] for col in COLUMNS], header=True))

        for snapshot in snapshots:
            lines.append(_border("├", "┼", "┤"))
            lines.extend(self._row_lines(RenderRow.from_snapshot(snapshot).cells()))

        lines.append(_border("└", "┴", "┘"))
        return "\n".join(lines)
