"""
Services subpackage - Reachability monitoring.

- ReachabilityMonitor: status of one target plus change notifications
- SystemReachabilityProbe: flags derived from the host's interfaces and routes
- NotificationCenter: process-wide broadcast of change notifications
"""

from netreach.services.notification_center import Notification, NotificationCenter
from netreach.services.reachability_monitor import ReachabilityMonitor
from netreach.services.system_probe import SystemReachabilityProbe

__all__ = [
    "Notification",
    "NotificationCenter",
    "ReachabilityMonitor",
    "SystemReachabilityProbe",
]
