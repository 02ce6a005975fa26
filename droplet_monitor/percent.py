"""
droplet_monitor.percent

Percentage math and text helpers shared by collectors and renderers
"""

from __future__ import annotations

import math
import re

GIB = 1024 ** 3
BAR_WIDTH = 20
BAR_FILLED = "▮"
BAR_EMPTY = "▯"

_PERCENT_RE = re.compile(r"(-?\d+\.\d+)%")


def percentage(used: float, total: float) -> str:
    """
    (used / total) * 100 with exactly two decimals, e.g. "30.00"

    Raises ValueError when total is zero or the result is not finite
    """
    if total == 0:
        raise ValueError("percentage total must be non-zero")
    value = (used / total) * 100
    if not math.isfinite(value):
        raise ValueError(f"percentage is not finite: {used}/{total}")
    return f"{value:.2f}"


def to_gb(n_bytes: float) -> str:
    return f"{n_bytes / GIB:.2f}"


def parse_percentage(text: str) -> float | None:
    """
    Pull the leading NN.NN out of a formatted cell ("12.50% (...)")

    Sentinels ("N/A", "") yield None
    """
    match = _PERCENT_RE.search(text or "")
    if match is None:
        return None
    return float(match.group(1))


def progress_bar(pct: float, width: int = BAR_WIDTH) -> str:
    # half-up, not banker's rounding
    filled = math.floor((pct / 100) * width + 0.5)
    filled = max(0, min(width, filled))
    return BAR_FILLED * filled + BAR_EMPTY * (width - filled)
