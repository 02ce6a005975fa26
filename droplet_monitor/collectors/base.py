"""
droplet_monitor.collectors.base

Light result wrapper -> keep one failing metric from sinking the whole host
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional


@dataclass(frozen=True)
class CollectorOutcome:
    """
    Normalized collector result
    - ok: false=failure, error details in error fields
    - value: collector result if ok=true (may itself be None = no data)
    """

    name: str
    ok: bool
    value: Optional[Any] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


async def run_collector(name: str, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> CollectorOutcome:
    """
    Await collector & collect failure as data
    """
    try:
        v = await fn(*args, **kwargs)
        return CollectorOutcome(name=name, ok=True, value=v, error_type=None, error_message=None)
    except Exception as e:
        return CollectorOutcome(
            name=name,
            ok=False,
            value=None,
            error_type=type(e).__name__,
            error_message=str(e),
        )
