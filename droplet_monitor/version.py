"""droplet_monitor.version"""

MONITOR_VERSION = "0.1.0"
