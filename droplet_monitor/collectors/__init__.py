"""droplet_monitor.collectors package exports."""

from droplet_monitor.collectors.cpu import collect_cpu
from droplet_monitor.collectors.disk import collect_filesystems
from droplet_monitor.collectors.fetch import fetch_metrics
from droplet_monitor.collectors.load import collect_load
from droplet_monitor.collectors.memory import collect_memory

__all__ = [
    "collect_cpu",
    "collect_filesystems",
    "collect_load",
    "collect_memory",
    "fetch_metrics",
]
